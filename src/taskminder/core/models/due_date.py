"""DueDate 值对象

不可变的 UTC 时间点包装。通过 DueDate.parse 受控构造，
所有"是否过期 / 是否在窗口内"的判断均以调用时刻的墙钟为准。
"""

import math
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_validator

from ..exceptions import InvalidDateError


def _to_utc(value: datetime) -> datetime:
    """naive datetime 视为 UTC，aware datetime 换算到 UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class DueDate(BaseModel):
    """截止时间值对象"""

    model_config = ConfigDict(frozen=True)

    value: datetime

    @field_validator("value")
    @classmethod
    def _normalize(cls, v: datetime) -> datetime:
        return _to_utc(v)

    @classmethod
    def parse(cls, raw: datetime | str | int | float) -> "DueDate":
        """从 datetime、ISO-8601 文本或毫秒级时间戳构造

        Raises:
            InvalidDateError: 结果不是有效时间点
        """
        if isinstance(raw, bool):
            raise InvalidDateError(raw)

        if isinstance(raw, datetime):
            return cls(value=raw)

        if isinstance(raw, (int, float)):
            if isinstance(raw, float) and not math.isfinite(raw):
                raise InvalidDateError(raw)
            try:
                return cls(value=datetime.fromtimestamp(raw / 1000, UTC))
            except (OverflowError, OSError, ValueError) as e:
                raise InvalidDateError(raw) from e

        if isinstance(raw, str):
            text = raw.strip()
            if not text:
                raise InvalidDateError(raw)
            try:
                return cls(value=datetime.fromisoformat(text))
            except ValueError as e:
                raise InvalidDateError(raw) from e

        raise InvalidDateError(raw)

    def is_past(self, now: datetime | None = None) -> bool:
        """截止时间是否已早于当前时刻"""
        return self.value < _resolve_now(now)

    def is_within_hours(self, hours: float, now: datetime | None = None) -> bool:
        """截止时间是否严格在未来且距今不超过 hours 小时

        0 < (due - now) <= hours；恰好等于 now 时为 False，恰好等于上界时为 True。
        """
        delta = self.value - _resolve_now(now)
        return timedelta(0) < delta <= timedelta(hours=hours)

    def hours_until(self, now: datetime | None = None) -> float:
        """距截止时间的小时数（已过期为负数）"""
        return (self.value - _resolve_now(now)) / timedelta(hours=1)

    def isoformat(self) -> str:
        return self.value.isoformat()


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    return _to_utc(now)
