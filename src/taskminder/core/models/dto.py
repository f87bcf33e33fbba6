"""输入 / 输出数据传输对象

TaskUpdate 通过 pydantic 的 model_fields_set 区分"未提供"与"显式 null"，
编排层据此构造三态变更集。
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from .task import Task

T = TypeVar("T")


class TaskCreate(BaseModel):
    """创建任务输入"""

    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    due_date: str | None = Field(default=None, description="ISO-8601 截止时间")


class TaskUpdate(BaseModel):
    """局部更新输入

    未出现在 model_fields_set 中的字段视为"保持原值"；
    description / due_date 显式传 null 表示清空。
    """

    title: str | None = None
    description: str | None = None
    status: str | None = None
    due_date: str | None = None

    def is_set(self, field: str) -> bool:
        """字段是否被调用方显式提供（包括显式 null）"""
        return field in self.model_fields_set


class TaskView(BaseModel):
    """任务只读视图"""

    task_id: str
    title: str
    description: str | None
    status: str
    due_date: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_task(cls, task: Task) -> "TaskView":
        return cls(
            task_id=task.task_id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            due_date=task.due_date.isoformat() if task.due_date else None,
            created_at=task.created_at.isoformat(),
            updated_at=task.updated_at.isoformat(),
        )


class PaginationMeta(BaseModel):
    """分页元信息"""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class PagedResult(BaseModel, Generic[T]):
    """分页结果"""

    items: list[T]
    pagination: PaginationMeta


class TaskPage(BaseModel):
    """存储层返回的一页任务 + 满足条件的总数"""

    items: list[Task]
    total: int = Field(ge=0)
