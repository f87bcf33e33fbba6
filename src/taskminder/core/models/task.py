"""Task 领域模型

Task 是不可变聚合：任何修改都通过 update() 返回新实例，
旧实例保持有效。task_id 与 created_at 在实体生命周期内不变，
updated_at 每次修改严格递增。
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .due_date import DueDate
from .enums import TaskStatus

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


class UnsetType(Enum):
    """"未提供"哨兵：区分"保持原值"与显式 None（清空）"""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = UnsetType.UNSET


class Task(BaseModel):
    """Task 数据模型"""

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(min_length=1, description="唯一标识，ULID 格式")
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH, description="任务标题")
    description: str | None = Field(
        default=None, max_length=DESCRIPTION_MAX_LENGTH, description="任务描述"
    )
    status: TaskStatus = Field(description="当前状态")
    due_date: DueDate | None = Field(default=None, description="截止时间")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Task":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    @classmethod
    def create(
        cls,
        task_id: str,
        title: str,
        description: str | None,
        status: TaskStatus,
        due_date: DueDate | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "Task":
        """原始构造入口，新建与从存储恢复共用，不做任何默认值推断"""
        return cls(
            task_id=task_id,
            title=title,
            description=description,
            status=status,
            due_date=due_date,
            created_at=created_at,
            updated_at=updated_at,
        )

    def update(
        self,
        *,
        title: str | UnsetType = UNSET,
        description: str | None | UnsetType = UNSET,
        status: TaskStatus | UnsetType = UNSET,
        due_date: DueDate | None | UnsetType = UNSET,
        now: datetime | None = None,
    ) -> "Task":
        """返回应用变更后的新实例

        每个参数三态：UNSET 保持原值；给定值则替换；
        description / due_date 传 None 表示清空。
        无论是否有字段变化，updated_at 都推进到当前时刻。
        """
        return Task(
            task_id=self.task_id,
            title=self.title if title is UNSET else title,
            description=self.description if description is UNSET else description,
            status=self.status if status is UNSET else status,
            due_date=self.due_date if due_date is UNSET else due_date,
            created_at=self.created_at,
            updated_at=_next_updated_at(self.updated_at, now),
        )

    def complete(self, now: datetime | None = None) -> "Task":
        """标记为已完成"""
        return self.update(status=TaskStatus.COMPLETED, now=now)

    def is_due_within_hours(self, hours: float, now: datetime | None = None) -> bool:
        """截止时间是否在未来 hours 小时内（按调用时刻判断）"""
        if self.due_date is None:
            return False
        return self.due_date.is_within_hours(hours, now)


def _next_updated_at(previous: datetime, now: datetime | None) -> datetime:
    """取当前时刻；时钟未前进时在上次更新时间上加 1 微秒，保证严格递增"""
    candidate = now or datetime.now(UTC)
    if candidate.tzinfo is None:
        candidate = candidate.replace(tzinfo=UTC)
    if candidate <= previous:
        candidate = previous + timedelta(microseconds=1)
    return candidate
