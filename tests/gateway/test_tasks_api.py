"""任务 HTTP 接口测试

测试内容：
1. POST/GET/PUT/DELETE /api/tasks 状态码与响应体
2. 校验失败 400 + details，不存在 404
3. PUT 的 null 语义
4. /health、/ready、请求 ID 响应头与请求日志字段
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

from httpx import ASGITransport, AsyncClient
from structlog.testing import capture_logs

MISSING_ID = "01JNOTEXIST000000000000000"


async def _create(client: AsyncClient, **body) -> dict:
    body.setdefault("title", "写周报")
    resp = await client.post("/api/tasks", json=body)
    assert resp.status_code == 201
    return resp.json()


class TestCreateAndRead:
    async def test_create_returns_201(self, client: AsyncClient):
        data = await _create(client, description="本周进展")
        assert data["title"] == "写周报"
        assert data["description"] == "本周进展"
        assert data["status"] == "pending"
        assert data["due_date"] is None
        assert len(data["task_id"]) == 26

    async def test_create_missing_title(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"description": "无标题"})
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["path"] == "title"

    async def test_create_invalid_due_date(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"title": "t", "due_date": "tomorrow"})
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["details"] == [
            {"path": "due_date", "message": "Invalid date format. Use ISO 8601 format."}
        ]

    async def test_create_empty_due_date(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"title": "t", "due_date": ""})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0]["path"] == "due_date"

        resp = await client.get("/api/tasks")
        assert resp.json()["pagination"]["total"] == 0

    async def test_create_schedules_when_due_soon(self, client: AsyncClient, notifier: AsyncMock):
        due = (datetime.now(UTC) + timedelta(hours=3)).isoformat()
        data = await _create(client, due_date=due)
        notifier.schedule.assert_awaited_once()
        assert notifier.schedule.await_args.args[0] == data["task_id"]

    async def test_get_task(self, client: AsyncClient):
        created = await _create(client)
        resp = await client.get(f"/api/tasks/{created['task_id']}")
        assert resp.status_code == 200
        assert resp.json() == created

    async def test_get_missing_task(self, client: AsyncClient):
        resp = await client.get(f"/api/tasks/{MISSING_ID}")
        assert resp.status_code == 404
        error = resp.json()["error"]
        assert error["code"] == "TASK_NOT_FOUND"
        assert error["message"] == f"Task with id {MISSING_ID} does not exist"


class TestList:
    async def test_default_pagination(self, client: AsyncClient):
        for i in range(3):
            await _create(client, title=f"任务 {i}")

        resp = await client.get("/api/tasks")
        assert resp.status_code == 200
        data = resp.json()
        assert [t["title"] for t in data["items"]] == ["任务 2", "任务 1", "任务 0"]
        assert data["pagination"] == {
            "page": 1,
            "limit": 10,
            "total": 3,
            "total_pages": 1,
            "has_next": False,
            "has_previous": False,
        }

    async def test_status_filter(self, client: AsyncClient):
        first = await _create(client, title="一")
        await _create(client, title="二")
        await client.post(f"/api/tasks/{first['task_id']}/complete")

        resp = await client.get("/api/tasks", params={"status": "completed"})
        items = resp.json()["items"]
        assert [t["task_id"] for t in items] == [first["task_id"]]

    async def test_out_of_range_limit(self, client: AsyncClient):
        resp = await client.get("/api/tasks", params={"limit": 1001})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0] == {
            "path": "limit",
            "message": "Limit cannot exceed 1000",
        }

    async def test_out_of_range_page(self, client: AsyncClient):
        resp = await client.get("/api/tasks", params={"page": 0})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0]["path"] == "page"

    async def test_non_numeric_page(self, client: AsyncClient):
        resp = await client.get("/api/tasks", params={"page": "abc"})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0]["path"] == "page"

    async def test_invalid_status_filter(self, client: AsyncClient):
        resp = await client.get("/api/tasks", params={"status": "archived"})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0]["path"] == "status"


class TestUpdate:
    async def test_partial_update(self, client: AsyncClient):
        created = await _create(client, description="原描述")
        resp = await client.put(
            f"/api/tasks/{created['task_id']}", json={"status": "in_progress"}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "in_progress"
        assert data["description"] == "原描述"

    async def test_null_clears_description_and_due_date(self, client: AsyncClient):
        due = (datetime.now(UTC) + timedelta(days=3)).isoformat()
        created = await _create(client, description="原描述", due_date=due)

        resp = await client.put(
            f"/api/tasks/{created['task_id']}",
            json={"description": None, "due_date": None, "title": None},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["description"] is None
        assert data["due_date"] is None
        assert data["title"] == "写周报"

    async def test_update_empty_due_date(self, client: AsyncClient):
        created = await _create(client)
        resp = await client.put(f"/api/tasks/{created['task_id']}", json={"due_date": ""})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0]["path"] == "due_date"

    async def test_update_missing(self, client: AsyncClient):
        resp = await client.put(f"/api/tasks/{MISSING_ID}", json={"title": "x"})
        assert resp.status_code == 404

    async def test_update_invalid_status(self, client: AsyncClient):
        created = await _create(client)
        resp = await client.put(f"/api/tasks/{created['task_id']}", json={"status": "done"})
        assert resp.status_code == 400
        assert resp.json()["error"]["details"][0]["path"] == "status"


class TestCompleteAndDelete:
    async def test_complete(self, client: AsyncClient):
        created = await _create(client)
        resp = await client.post(f"/api/tasks/{created['task_id']}/complete")
        assert resp.status_code == 200
        assert resp.json()["status"] == "completed"

    async def test_delete(self, client: AsyncClient):
        created = await _create(client)
        resp = await client.delete(f"/api/tasks/{created['task_id']}")
        assert resp.status_code == 204
        assert resp.content == b""

        resp = await client.get(f"/api/tasks/{created['task_id']}")
        assert resp.status_code == 404

    async def test_delete_missing(self, client: AsyncClient):
        resp = await client.delete(f"/api/tasks/{MISSING_ID}")
        assert resp.status_code == 404


class TestOperational:
    async def test_health(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_ready(self, client: AsyncClient):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        assert data["checks"] == {
            "sqlite": "ok",
            "notification_queue": 0,
            "notification_worker": "disabled",
        }

    async def test_ready_sqlite_failure(self, test_app, store_group):
        await store_group.conn.close()
        async with AsyncClient(
            transport=ASGITransport(app=test_app),
            base_url="http://test",
        ) as ac:
            resp = await ac.get("/ready")
        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["sqlite"] == "unavailable"

    async def test_request_id_header(self, client: AsyncClient):
        resp = await client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 26

    async def test_request_log_carries_task_id(self, client: AsyncClient):
        created = await _create(client)

        with capture_logs() as logs:
            resp = await client.get(f"/api/tasks/{created['task_id']}")
        assert resp.status_code == 200

        completed = [e for e in logs if e["event"] == "request_completed"]
        assert len(completed) == 1
        assert completed[0]["task_id"] == created["task_id"]
        assert completed[0]["status_code"] == 200
        assert completed[0]["duration_ms"] >= 0

    async def test_request_log_without_task_id(self, client: AsyncClient):
        with capture_logs() as logs:
            await client.get("/health")

        completed = [e for e in logs if e["event"] == "request_completed"]
        assert completed[0]["task_id"] is None
