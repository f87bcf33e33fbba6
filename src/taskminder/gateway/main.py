"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭、服务显式装配、通知消费者启停、路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from taskminder.core.config import get_db_path, load_notification_config
from taskminder.core.store import StoreGroup, create_store_group

from .middleware.error_handler import register_error_handlers
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks
from .services.delivery import FileDeliveryHandler
from .services.notification_service import NotificationService, NotificationWorker
from .services.task_service import TaskService

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时装配 Store 与服务，关闭时停止消费者并清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group

    notify_config = load_notification_config()
    notifier = NotificationService(
        store_group.notification_queue,
        record_ttl_seconds=notify_config.record_ttl_seconds,
    )
    app.state.task_service = TaskService(store_group.task_store, notifier)

    worker: NotificationWorker | None = None
    worker_store_group: StoreGroup | None = None
    if notify_config.enabled:
        # 消费者独占连接，与请求路径的事务互不影响
        worker_store_group = await create_store_group(db_path)
        worker = NotificationWorker(
            worker_store_group.notification_queue,
            FileDeliveryHandler(notify_config.log_path),
            poll_interval_s=notify_config.poll_interval_s,
        )
        worker.start()
    app.state.notification_worker = worker
    app.state.worker_store_group = worker_store_group
    log.info(
        "app_started",
        notification_worker=notify_config.enabled,
        notifications_log=str(notify_config.log_path),
    )

    yield

    if worker is not None:
        await worker.stop()
    if worker_store_group is not None:
        await worker_store_group.conn.close()
    await store_group.conn.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Taskminder",
        version="0.1.0",
        description="任务管理 API + 到期提醒",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)
    register_error_handlers(app)

    setup_logging()

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
