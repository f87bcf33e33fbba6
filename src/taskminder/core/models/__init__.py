"""Taskminder Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .dto import PagedResult, PaginationMeta, TaskCreate, TaskPage, TaskUpdate, TaskView
from .due_date import DueDate
from .enums import NotificationOutcome, TaskStatus
from .notification import NotificationDelivery, NotificationRecord
from .pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    MIN_LIMIT,
    MIN_PAGE,
    build_pagination_meta,
)
from .task import UNSET, Task, UnsetType

__all__ = [
    # 值对象
    "TaskStatus",
    "DueDate",
    # Task
    "Task",
    "UNSET",
    "UnsetType",
    # DTO
    "TaskCreate",
    "TaskUpdate",
    "TaskView",
    "TaskPage",
    "PagedResult",
    "PaginationMeta",
    # 分页
    "DEFAULT_PAGE",
    "DEFAULT_LIMIT",
    "MIN_PAGE",
    "MIN_LIMIT",
    "MAX_LIMIT",
    "build_pagination_meta",
    # 通知
    "NotificationRecord",
    "NotificationDelivery",
    "NotificationOutcome",
]
