"""tests/gateway 测试配置 -- Store / Service / FastAPI 测试客户端"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskminder.core.store import StoreGroup, create_store_group
from taskminder.gateway.services.task_service import TaskService

_ENV_KEYS = ["TASKMINDER_DB_PATH", "TASKMINDER_NOTIFICATIONS_LOG", "TASKMINDER_NOTIFY_WORKER"]


@pytest_asyncio.fixture
async def store_group(tmp_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """临时数据库上的 StoreGroup"""
    group = await create_store_group(str(tmp_path / "sqlite" / "test.db"))
    yield group
    await group.conn.close()


@pytest_asyncio.fixture
async def notifier() -> AsyncMock:
    """记录调用的通知生产者替身"""
    mock = AsyncMock()
    mock.schedule = AsyncMock(return_value=None)
    return mock


@pytest_asyncio.fixture
async def service(store_group: StoreGroup, notifier: AsyncMock) -> TaskService:
    return TaskService(store_group.task_store, notifier)


@pytest_asyncio.fixture
async def test_app(tmp_path: Path, store_group: StoreGroup, service: TaskService):
    """创建测试用 FastAPI app（手动初始化，绕过 lifespan）"""
    os.environ["TASKMINDER_DB_PATH"] = str(tmp_path / "sqlite" / "test.db")
    os.environ["TASKMINDER_NOTIFICATIONS_LOG"] = str(tmp_path / "notifications.log")
    os.environ["TASKMINDER_NOTIFY_WORKER"] = "false"

    from taskminder.gateway.main import create_app

    app = create_app()
    app.state.store_group = store_group
    app.state.task_service = service
    app.state.notification_worker = None

    yield app

    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
