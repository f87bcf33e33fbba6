"""异常 -> HTTP 响应映射

- ValidationError / 请求体校验失败 -> 400
- NotFoundError -> 404
响应体统一为 {"error": {"code", "message", "details"?}}。
"""

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse
from taskminder.core.exceptions import NotFoundError, ValidationError

log = structlog.get_logger()


def _error_body(code: str, message: str, details: list[dict] | None = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    await log.ainfo("request_validation_failed", code=exc.code, message=exc.message)
    return JSONResponse(
        status_code=400,
        content=_error_body(
            exc.code,
            exc.message,
            [e.model_dump() for e in exc.errors],
        ),
    )


async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=_error_body(exc.code, exc.message))


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """请求形状不合法（类型错误、缺字段、JSON 解析失败）"""
    details = [
        {
            "path": ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query")),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=_error_body(ValidationError.code, "Validation failed", details),
    )


def register_error_handlers(app: FastAPI) -> None:
    """注册异常处理器"""
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
