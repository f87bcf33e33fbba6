"""SQLite 数据库初始化

PRAGMA 配置 + 三张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    task_id      TEXT PRIMARY KEY,
    title        TEXT NOT NULL,
    description  TEXT,
    status       TEXT NOT NULL DEFAULT 'pending',
    due_date     TEXT,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]

# 键控通知记录（按 task 覆盖写，带过期时间）
_NOTIFICATION_RECORDS_DDL = """
CREATE TABLE IF NOT EXISTS notification_records (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    expires_at  TEXT NOT NULL
);
"""

# 通知工作队列（FIFO，seq 单调递增）
_NOTIFICATION_QUEUE_DDL = """
CREATE TABLE IF NOT EXISTS notification_queue (
    seq          INTEGER PRIMARY KEY AUTOINCREMENT,
    value        TEXT NOT NULL,
    enqueued_at  TEXT NOT NULL
);
"""

_NOTIFICATION_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_notification_records_expires_at "
    "ON notification_records(expires_at);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    await conn.execute(_TASKS_DDL)
    await conn.execute(_NOTIFICATION_RECORDS_DDL)
    await conn.execute(_NOTIFICATION_QUEUE_DDL)

    # 创建索引
    for idx_sql in _TASKS_INDEXES + _NOTIFICATION_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
