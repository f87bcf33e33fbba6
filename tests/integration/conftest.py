"""集成测试共享 fixture -- 真实 Store + 通知生产者 + 文件投递"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskminder.core.store import create_store_group
from taskminder.gateway.services.delivery import FileDeliveryHandler
from taskminder.gateway.services.notification_service import (
    NotificationService,
    NotificationWorker,
)
from taskminder.gateway.services.task_service import TaskService


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """集成测试用 FastAPI app，消费者由测试手动驱动"""
    os.environ["TASKMINDER_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["TASKMINDER_NOTIFY_WORKER"] = "false"

    from taskminder.gateway.main import create_app

    app = create_app()

    store_group = await create_store_group(str(tmp_path / "test.db"))
    app.state.store_group = store_group
    app.state.task_service = TaskService(
        store_group.task_store,
        NotificationService(store_group.notification_queue),
    )
    app.state.notification_worker = NotificationWorker(
        store_group.notification_queue,
        FileDeliveryHandler(tmp_path / "notifications.log"),
    )

    yield app

    await store_group.conn.close()
    os.environ.pop("TASKMINDER_DB_PATH", None)
    os.environ.pop("TASKMINDER_NOTIFY_WORKER", None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
