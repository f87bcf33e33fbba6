"""端口接口定义

定义 TaskStore、NotificationQueue、NotificationScheduler、DeliveryHandler 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
所有方法均为 awaitable，调用方不得假设同步完成。
"""

from typing import Protocol

from ..models.dto import TaskPage
from ..models.due_date import DueDate
from ..models.enums import TaskStatus
from ..models.notification import NotificationDelivery
from ..models.task import Task


class TaskStore(Protocol):
    """Task 存储接口"""

    async def save(self, task: Task) -> Task:
        """插入或覆盖任务记录，返回已保存的任务"""
        ...

    async def find_by_id(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        ...

    async def find_all(self, status: TaskStatus | None = None) -> list[Task]:
        """查询任务列表，支持按状态精确筛选"""
        ...

    async def find_paginated(
        self,
        page: int,
        limit: int,
        status: TaskStatus | None = None,
    ) -> TaskPage:
        """分页查询，按 created_at 倒序（最新在前）"""
        ...

    async def delete(self, task_id: str) -> None:
        """删除任务"""
        ...


class NotificationQueue(Protocol):
    """通知队列接口

    pop_work 必须原子：同一条记录不会被两次弹出。
    """

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """写入键控记录（覆盖同键旧值），ttl_seconds 后过期"""
        ...

    async def push_work(self, value: str) -> None:
        """向工作队列追加一条记录"""
        ...

    async def pop_work(self) -> str | None:
        """原子弹出一条记录，队列为空时返回 None"""
        ...


class NotificationScheduler(Protocol):
    """通知生产者接口（编排层依赖）"""

    async def schedule(self, task_id: str, due_date: DueDate) -> None:
        """为任务安排一次到期提醒"""
        ...


class DeliveryHandler(Protocol):
    """投递副作用接口，传输方式（日志/邮件/推送）由实现决定"""

    async def __call__(self, delivery: NotificationDelivery) -> None:
        ...
