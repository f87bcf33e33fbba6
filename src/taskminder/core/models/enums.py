"""枚举定义

包含 TaskStatus 闭集与通知记录的最终处置结果 NotificationOutcome。
"""

from enum import StrEnum

from ..exceptions import InvalidStatusError


class TaskStatus(StrEnum):
    """任务状态（闭集）"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, text: str) -> "TaskStatus":
        """从文本解析状态，大小写不敏感

        "in_progress" 与 "in-progress" 同义。

        Raises:
            InvalidStatusError: 无法识别的状态文本
        """
        normalized = text.lower() if isinstance(text, str) else ""
        status = _STATUS_ALIASES.get(normalized)
        if status is None:
            raise InvalidStatusError(text)
        return status


_STATUS_ALIASES: dict[str, TaskStatus] = {
    "pending": TaskStatus.PENDING,
    "in_progress": TaskStatus.IN_PROGRESS,
    "in-progress": TaskStatus.IN_PROGRESS,
    "completed": TaskStatus.COMPLETED,
    "cancelled": TaskStatus.CANCELLED,
}


class NotificationOutcome(StrEnum):
    """通知记录处置结果

    Enqueued -> {DELIVERED | DROPPED_STALE | DROPPED_ERROR}，无重试、无回退。
    """

    DELIVERED = "delivered"
    DROPPED_STALE = "dropped_stale"
    DROPPED_ERROR = "dropped_error"
