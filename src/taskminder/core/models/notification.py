"""通知记录模型

NotificationRecord 由生产者写入一次、消费者读取一次；
NotificationDelivery 是交给投递回调的载荷。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator


class NotificationRecord(BaseModel):
    """队列中的通知记录"""

    task_id: str
    due_date: datetime
    scheduled_at: datetime

    @field_validator("due_date", "scheduled_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


class NotificationDelivery(BaseModel):
    """投递回调载荷"""

    task_id: str
    due_date: datetime
    hours_until_due: float = Field(description="投递时刻重新计算的剩余小时数")
