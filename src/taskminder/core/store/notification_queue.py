"""NotificationQueue SQLite 实现

- notification_records: 按键覆盖写的通知记录，带过期时间；
- notification_queue: FIFO 工作队列，pop_work 以单条 DELETE ... RETURNING 语句完成，
  同一条记录只会被弹出一次。
"""

from datetime import UTC, datetime, timedelta

import aiosqlite


def _now() -> datetime:
    return datetime.now(UTC)


def _ts(value: datetime) -> str:
    return value.isoformat(timespec="microseconds")


class SqliteNotificationQueue:
    """NotificationQueue 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """写入键控记录并顺带清理已过期记录"""
        now = _now()
        expires_at = now + timedelta(seconds=ttl_seconds)
        try:
            await self._conn.execute(
                """
                INSERT INTO notification_records (key, value, expires_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    expires_at = excluded.expires_at
                """,
                (key, value, _ts(expires_at)),
            )
            await self._conn.execute(
                "DELETE FROM notification_records WHERE expires_at <= ?",
                (_ts(now),),
            )
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def get(self, key: str) -> str | None:
        """读取未过期的键控记录"""
        cursor = await self._conn.execute(
            "SELECT value FROM notification_records WHERE key = ? AND expires_at > ?",
            (key, _ts(_now())),
        )
        row = await cursor.fetchone()
        return row[0] if row else None

    async def push_work(self, value: str) -> None:
        """追加到工作队列尾部"""
        try:
            await self._conn.execute(
                "INSERT INTO notification_queue (value, enqueued_at) VALUES (?, ?)",
                (value, _ts(_now())),
            )
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def pop_work(self) -> str | None:
        """弹出队首记录（FIFO），队列为空返回 None"""
        try:
            cursor = await self._conn.execute(
                """
                DELETE FROM notification_queue
                WHERE seq = (SELECT MIN(seq) FROM notification_queue)
                RETURNING value
                """
            )
            row = await cursor.fetchone()
            await cursor.close()
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise
        return row[0] if row else None

    async def queue_length(self) -> int:
        """工作队列中待处理记录数"""
        cursor = await self._conn.execute("SELECT COUNT(*) FROM notification_queue")
        row = await cursor.fetchone()
        return int(row[0]) if row else 0
