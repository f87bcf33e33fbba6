"""tests/core 测试配置 -- 核心层 fixture"""

from datetime import UTC, datetime

import pytest
from taskminder.core.models import DueDate, Task, TaskStatus


@pytest.fixture
def fixed_now() -> datetime:
    """固定参考时刻，避免窗口边界测试受墙钟影响"""
    return datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_task():
    """构造 Task 的工厂"""

    def _make(
        task_id: str = "01JTESTTASK000000000000001",
        title: str = "写周报",
        description: str | None = "本周进展",
        status: TaskStatus = TaskStatus.PENDING,
        due_date: DueDate | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> Task:
        created = created_at or datetime(2026, 1, 1, 9, 0, 0, tzinfo=UTC)
        return Task.create(
            task_id=task_id,
            title=title,
            description=description,
            status=status,
            due_date=due_date,
            created_at=created,
            updated_at=updated_at or created,
        )

    return _make
