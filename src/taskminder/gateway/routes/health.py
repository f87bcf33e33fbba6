"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性与通知队列积压量。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. notification_queue: 待处理提醒数量
    3. notification_worker: 后台消费者是否在运行
    """
    checks: dict = {}
    all_ok = True

    # 1. SQLite 连通性检查
    try:
        store_group = request.app.state.store_group
        cursor = await store_group.conn.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("ready_check_failed", check="sqlite", error_type=type(e).__name__)
        checks["sqlite"] = "unavailable"
        all_ok = False

    # 2. 队列积压
    try:
        queue = request.app.state.store_group.notification_queue
        checks["notification_queue"] = await queue.queue_length()
    except Exception as e:
        log.warning(
            "ready_check_failed", check="notification_queue", error_type=type(e).__name__
        )
        checks["notification_queue"] = "unavailable"
        all_ok = False

    # 3. 后台消费者（未启用时标记 disabled，不影响就绪状态）
    worker = getattr(request.app.state, "notification_worker", None)
    if worker is None:
        checks["notification_worker"] = "disabled"
    else:
        checks["notification_worker"] = "running" if worker.is_running else "stopped"

    status_code = 200 if all_ok else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
