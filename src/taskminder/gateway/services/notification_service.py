"""到期提醒管道 -- 生产者 NotificationService + 消费者 NotificationWorker

两者只通过 NotificationQueue 协作，不共享进程内可变状态：
- 生产者：写入按 task 覆盖的键控记录，并向工作队列追加一份副本；
- 消费者：按固定间隔醒来，每次最多弹出一条记录，以当前时刻重新判断是否过期，
  仍在窗口内才投递。投递失败只记录日志，不重新入队（至多一次、尽力而为）。
"""

import asyncio
import contextlib
from datetime import UTC, datetime

import structlog
from pydantic import ValidationError as PydanticValidationError
from taskminder.core.config import DUE_SOON_HOURS
from taskminder.core.models import (
    DueDate,
    NotificationDelivery,
    NotificationOutcome,
    NotificationRecord,
)
from taskminder.core.store.protocols import DeliveryHandler, NotificationQueue

log = structlog.get_logger()

NOTIFICATION_KEY_PREFIX = "notification:"


class NotificationService:
    """通知生产者"""

    def __init__(self, queue: NotificationQueue, record_ttl_seconds: int = 86400) -> None:
        self._queue = queue
        self._record_ttl_seconds = record_ttl_seconds

    async def schedule(self, task_id: str, due_date: DueDate) -> None:
        """为任务安排一次提醒

        两次写入彼此独立：键控记录写成功而入队失败时，记录只会自然过期。
        同一任务多次调度会产生多条队列记录，不做去重。
        """
        record = NotificationRecord(
            task_id=task_id,
            due_date=due_date.value,
            scheduled_at=datetime.now(UTC),
        )
        payload = record.model_dump_json()

        await self._queue.put(
            f"{NOTIFICATION_KEY_PREFIX}{task_id}",
            payload,
            self._record_ttl_seconds,
        )
        await self._queue.push_work(payload)

        log.info(
            "notification_scheduled",
            task_id=task_id,
            due_date=due_date.isoformat(),
        )


class NotificationWorker:
    """通知消费者 -- 独立的定时轮询后台任务"""

    def __init__(
        self,
        queue: NotificationQueue,
        deliver: DeliveryHandler,
        *,
        poll_interval_s: float = 5.0,
        horizon_hours: float = DUE_SOON_HOURS,
    ) -> None:
        self._queue = queue
        self._deliver = deliver
        self._poll_interval_s = poll_interval_s
        self._horizon_hours = horizon_hours
        self._stop_event = asyncio.Event()
        self._runner: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    async def tick(self, now: datetime | None = None) -> NotificationOutcome | None:
        """弹出并处理至多一条记录

        Returns:
            该记录的处置结果；队列为空或弹出失败时返回 None
        """
        try:
            raw = await self._queue.pop_work()
        except Exception as e:
            log.error("notification_pop_failed", error_type=type(e).__name__)
            return None

        if raw is None:
            return None
        return await self._process(raw, now or datetime.now(UTC))

    async def _process(self, raw: str, now: datetime) -> NotificationOutcome:
        try:
            record = NotificationRecord.model_validate_json(raw)
        except PydanticValidationError:
            log.error("notification_record_invalid", raw_length=len(raw))
            return NotificationOutcome.DROPPED_ERROR

        # 以当前时刻重算，不信任生产者入队时的判断
        hours_until_due = DueDate(value=record.due_date).hours_until(now)
        if not 0 < hours_until_due <= self._horizon_hours:
            log.info(
                "notification_dropped_stale",
                task_id=record.task_id,
                hours_until_due=round(hours_until_due, 2),
            )
            return NotificationOutcome.DROPPED_STALE

        delivery = NotificationDelivery(
            task_id=record.task_id,
            due_date=record.due_date,
            hours_until_due=hours_until_due,
        )
        try:
            await self._deliver(delivery)
        except Exception as e:
            log.error(
                "notification_delivery_failed",
                task_id=record.task_id,
                error_type=type(e).__name__,
            )
            return NotificationOutcome.DROPPED_ERROR

        return NotificationOutcome.DELIVERED

    async def run(self) -> None:
        """轮询循环：每个间隔醒来一次，处理至多一条记录，直到 stop()"""
        log.info("notification_worker_started", poll_interval_s=self._poll_interval_s)
        try:
            while not self._stop_event.is_set():
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(
                        self._stop_event.wait(), timeout=self._poll_interval_s
                    )
                if self._stop_event.is_set():
                    break
                await self.tick()
        finally:
            log.info("notification_worker_stopped")

    def start(self) -> None:
        """以后台 asyncio 任务启动轮询"""
        if self.is_running:
            return
        self._stop_event.clear()
        self._runner = asyncio.create_task(self.run(), name="notification-worker")

    async def stop(self) -> None:
        """通知循环退出并等待其结束；已弹出的记录会处理完毕"""
        self._stop_event.set()
        if self._runner is not None:
            await self._runner
            self._runner = None
