"""默认投递副作用 -- 追加写入提醒日志文件"""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

import structlog
from taskminder.core.models import NotificationDelivery

log = structlog.get_logger()


class FileDeliveryHandler:
    """将提醒逐行追加到日志文件"""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def __call__(self, delivery: NotificationDelivery) -> None:
        line = (
            f"[{datetime.now(UTC).isoformat()}] Notification: Task {delivery.task_id} "
            f"is due in {delivery.hours_until_due:.2f} hours "
            f"(Due: {delivery.due_date.isoformat()})\n"
        )
        await asyncio.to_thread(self._append, line)
        log.info(
            "notification_delivered",
            task_id=delivery.task_id,
            hours_until_due=round(delivery.hours_until_due, 2),
        )

    def _append(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line)
