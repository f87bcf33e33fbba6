"""任务路由

POST   /api/tasks                      创建任务（201）
GET    /api/tasks                      分页查询，支持 status 筛选
GET    /api/tasks/{task_id}            任务详情
PUT    /api/tasks/{task_id}            局部更新
DELETE /api/tasks/{task_id}            删除（204）
POST   /api/tasks/{task_id}/complete   标记完成

业务异常由 middleware.error_handler 统一映射为 400 / 404。
"""

from fastapi import APIRouter, Depends, Query
from starlette.responses import Response
from taskminder.core.models import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    PagedResult,
    TaskCreate,
    TaskUpdate,
    TaskView,
)

from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter()


@router.post("/api/tasks", status_code=201, response_model=TaskView)
async def create_task(
    body: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    """创建任务"""
    return await service.create_task(body.title, body.description, body.due_date)


@router.get("/api/tasks", response_model=PagedResult[TaskView])
async def list_tasks(
    page: int = Query(default=DEFAULT_PAGE, description="页码，从 1 开始"),
    limit: int = Query(default=DEFAULT_LIMIT, description="每页条数，1-1000"),
    status: str | None = Query(default=None, description="按状态筛选"),
    service: TaskService = Depends(get_task_service),
):
    """分页查询任务列表，按 created_at 倒序"""
    return await service.list_tasks_paginated(page, limit, status)


@router.get("/api/tasks/{task_id}", response_model=TaskView)
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    return await service.get_task(task_id)


@router.put("/api/tasks/{task_id}", response_model=TaskView)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    """局部更新：未出现的字段保持不变，description / due_date 传 null 表示清空"""
    return await service.update_task(task_id, body)


@router.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    await service.delete_task(task_id)
    return Response(status_code=204)


@router.post("/api/tasks/{task_id}/complete", response_model=TaskView)
async def complete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    return await service.complete_task(task_id)
