"""TaskStore SQLite 实现

save 为 upsert：created_at 只在首次插入时写入，之后不再覆盖。
时间统一以 UTC、微秒精度的 ISO 文本存储，保证按文本排序即按时间排序。
"""

from datetime import UTC, datetime

import aiosqlite

from ..models.dto import TaskPage
from ..models.due_date import DueDate
from ..models.enums import TaskStatus
from ..models.task import Task

_COLUMNS = "task_id, title, description, status, due_date, created_at, updated_at"


def _ts(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec="microseconds")


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def save(self, task: Task) -> Task:
        """插入或更新任务记录"""
        try:
            await self._conn.execute(
                f"""
                INSERT INTO tasks ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(task_id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    status = excluded.status,
                    due_date = excluded.due_date,
                    updated_at = excluded.updated_at
                """,
                (
                    task.task_id,
                    task.title,
                    task.description,
                    task.status.value,
                    _ts(task.due_date.value) if task.due_date else None,
                    _ts(task.created_at),
                    _ts(task.updated_at),
                ),
            )
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise
        return task

    async def find_by_id(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def find_all(self, status: TaskStatus | None = None) -> list[Task]:
        """查询任务列表，支持按状态筛选，按 created_at 倒序"""
        if status:
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE status = ? "
                "ORDER BY created_at DESC, task_id DESC",
                (status.value,),
            )
        else:
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC, task_id DESC"
            )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def find_paginated(
        self,
        page: int,
        limit: int,
        status: TaskStatus | None = None,
    ) -> TaskPage:
        """分页查询，返回当前页任务与满足条件的总数"""
        offset = (page - 1) * limit
        where, params = ("WHERE status = ?", (status.value,)) if status else ("", ())

        cursor = await self._conn.execute(f"SELECT COUNT(*) FROM tasks {where}", params)
        count_row = await cursor.fetchone()
        total = int(count_row[0]) if count_row else 0

        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks {where} "
            "ORDER BY created_at DESC, task_id DESC LIMIT ? OFFSET ?",
            (*params, limit, offset),
        )
        rows = await cursor.fetchall()
        return TaskPage(items=[self._row_to_task(row) for row in rows], total=total)

    async def delete(self, task_id: str) -> None:
        """删除任务"""
        try:
            await self._conn.execute("DELETE FROM tasks WHERE task_id = ?", (task_id,))
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task.create(
            task_id=row[0],
            title=row[1],
            description=row[2],
            status=TaskStatus.parse(row[3]),
            due_date=DueDate.parse(row[4]) if row[4] else None,
            created_at=datetime.fromisoformat(row[5]),
            updated_at=datetime.fromisoformat(row[6]),
        )
