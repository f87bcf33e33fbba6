"""TaskService -- 任务创建/查询/更新/删除业务逻辑

编排流程：
1. 解析并校验输入（状态、截止时间、分页参数）
2. 构建或更新 Task 实体
3. 通过 TaskStore 持久化
4. 截止时间落在 24 小时窗口内时，交给通知生产者安排提醒

值对象与实体构造失败统一转换为 ValidationError（带字段路径），
存储层异常原样向上传播。
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from pydantic import ValidationError as PydanticValidationError
from taskminder.core.config import DUE_SOON_HOURS
from taskminder.core.exceptions import (
    FieldError,
    InvalidDateError,
    InvalidStatusError,
    NotFoundError,
    ValidationError,
)
from taskminder.core.models import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    MIN_LIMIT,
    MIN_PAGE,
    UNSET,
    DueDate,
    PagedResult,
    Task,
    TaskStatus,
    TaskUpdate,
    TaskView,
    UnsetType,
    build_pagination_meta,
)
from taskminder.core.store.protocols import NotificationScheduler, TaskStore
from ulid import ULID

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(
        self,
        task_store: TaskStore,
        notifier: NotificationScheduler | None = None,
        *,
        due_soon_hours: int = DUE_SOON_HOURS,
    ) -> None:
        self._task_store = task_store
        self._notifier = notifier
        self._due_soon_hours = due_soon_hours

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        due_date: str | None = None,
    ) -> TaskView:
        """创建任务，初始状态 PENDING

        Raises:
            ValidationError: 标题/描述长度非法或截止时间无法解析
        """
        parsed_due = self._parse_due_date(due_date) if due_date is not None else None
        now = datetime.now(UTC)
        task = self._validated(
            lambda: Task.create(
                task_id=str(ULID()),
                title=title,
                description=description or None,
                status=TaskStatus.PENDING,
                due_date=parsed_due,
                created_at=now,
                updated_at=now,
            )
        )

        saved = await self._task_store.save(task)
        log.info("task_created", task_id=saved.task_id)

        if parsed_due is not None and saved.is_due_within_hours(self._due_soon_hours):
            await self._schedule_notification(saved.task_id, parsed_due)

        return TaskView.from_task(saved)

    async def get_task(self, task_id: str) -> TaskView:
        """查询任务详情"""
        return TaskView.from_task(await self._load(task_id))

    async def list_tasks(self, status: str | None = None) -> list[TaskView]:
        """查询任务列表，status 非空时按状态精确筛选"""
        task_status = self._parse_status(status) if status else None
        tasks = await self._task_store.find_all(task_status)
        return [TaskView.from_task(t) for t in tasks]

    async def list_tasks_paginated(
        self,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        status: str | None = None,
    ) -> PagedResult[TaskView]:
        """分页查询任务，按创建时间倒序

        越界参数直接拒绝，不做截断。
        """
        if page < MIN_PAGE:
            raise ValidationError.for_field("page", f"Page must be at least {MIN_PAGE}")
        if limit < MIN_LIMIT:
            raise ValidationError.for_field("limit", f"Limit must be at least {MIN_LIMIT}")
        if limit > MAX_LIMIT:
            raise ValidationError.for_field("limit", f"Limit cannot exceed {MAX_LIMIT}")

        task_status = self._parse_status(status) if status else None
        result = await self._task_store.find_paginated(page, limit, task_status)

        return PagedResult[TaskView](
            items=[TaskView.from_task(t) for t in result.items],
            pagination=build_pagination_meta(page, limit, result.total),
        )

    async def update_task(self, task_id: str, patch: TaskUpdate) -> TaskView:
        """局部更新任务

        只有当 patch 显式给出新的截止时间、且更新后任务在提醒窗口内时才安排提醒；
        显式清空截止时间从不触发提醒。

        Raises:
            NotFoundError: 任务不存在（不会发生任何写入）
            ValidationError: 字段非法
        """
        task = await self._load(task_id)

        # title / status 显式 null 视为未提供
        title = patch.title if patch.title is not None else UNSET
        status = self._parse_status(patch.status) if patch.status is not None else UNSET
        description = patch.description if patch.is_set("description") else UNSET

        due_date: DueDate | None | UnsetType = UNSET
        if patch.due_date is not None:
            due_date = self._parse_due_date(patch.due_date)
        elif patch.is_set("due_date"):
            due_date = None

        updated = self._validated(
            lambda: task.update(
                title=title,
                description=description,
                status=status,
                due_date=due_date,
            )
        )
        saved = await self._task_store.save(updated)
        log.info("task_updated", task_id=task_id)

        if isinstance(due_date, DueDate) and saved.is_due_within_hours(self._due_soon_hours):
            await self._schedule_notification(saved.task_id, due_date)

        return TaskView.from_task(saved)

    async def complete_task(self, task_id: str) -> TaskView:
        """将任务标记为已完成"""
        task = await self._load(task_id)
        saved = await self._task_store.save(task.complete())
        log.info("task_completed", task_id=task_id)
        return TaskView.from_task(saved)

    async def delete_task(self, task_id: str) -> None:
        """删除任务；不存在时抛 NotFoundError 而非静默成功"""
        await self._load(task_id)
        await self._task_store.delete(task_id)
        log.info("task_deleted", task_id=task_id)

    async def _load(self, task_id: str) -> Task:
        task = await self._task_store.find_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    async def _schedule_notification(self, task_id: str, due_date: DueDate) -> None:
        """安排提醒；失败只记录日志，不影响已完成的主写入"""
        if self._notifier is None:
            return
        try:
            await self._notifier.schedule(task_id, due_date)
        except Exception as e:
            log.error(
                "notification_schedule_failed",
                task_id=task_id,
                error_type=type(e).__name__,
            )

    @staticmethod
    def _parse_status(text: str) -> TaskStatus:
        try:
            return TaskStatus.parse(text)
        except InvalidStatusError as e:
            raise ValidationError.for_field("status", str(e)) from e

    @staticmethod
    def _parse_due_date(text: str) -> DueDate:
        try:
            return DueDate.parse(text)
        except InvalidDateError as e:
            raise ValidationError.for_field(
                "due_date", "Invalid date format. Use ISO 8601 format."
            ) from e

    @staticmethod
    def _validated(factory: Callable[[], Task]) -> Task:
        """执行实体构造，将 pydantic 校验错误转换为字段级 ValidationError"""
        try:
            return factory()
        except PydanticValidationError as e:
            errors = [
                FieldError(
                    path=".".join(str(part) for part in err["loc"]) or "task",
                    message=err["msg"],
                )
                for err in e.errors()
            ]
            raise ValidationError("Validation failed", errors) from e
