"""配置模块 -- 可通过环境变量覆盖

包含数据库路径、到期提醒窗口、通知管道配置。
"""

import os
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

# 到期提醒窗口（小时）：创建/更新时据此决定是否投递提醒
DUE_SOON_HOURS: int = 24


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKMINDER_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKMINDER_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskminder.db"),
    )


class NotificationConfig(BaseModel):
    """通知管道配置 -- 从环境变量加载

    环境变量:
        TASKMINDER_NOTIFY_POLL_INTERVAL_S: 消费者轮询间隔（秒，默认 5）
        TASKMINDER_NOTIFY_RECORD_TTL_S: 按 task 键控记录的保留时长（秒，默认 86400）
        TASKMINDER_NOTIFICATIONS_LOG: 提醒落地文件路径
        TASKMINDER_NOTIFY_WORKER: 是否启动后台消费者（默认 true）
    """

    poll_interval_s: float = Field(default=5.0, gt=0, description="轮询间隔（秒）")
    record_ttl_seconds: int = Field(default=86400, ge=1, description="键控记录 TTL（秒）")
    log_path: Path = Field(
        default_factory=lambda: _get_base_dir() / "notifications.log",
        description="提醒日志文件",
    )
    enabled: bool = Field(default=True, description="是否启动后台消费者")


def load_notification_config() -> NotificationConfig:
    """从环境变量加载通知管道配置

    数值解析失败时记录警告并使用默认值，不阻塞启动。
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKMINDER_NOTIFY_POLL_INTERVAL_S"):
        try:
            kwargs["poll_interval_s"] = float(val)
        except ValueError:
            log.warning(
                "invalid_notification_config",
                env_var="TASKMINDER_NOTIFY_POLL_INTERVAL_S",
                value=val,
                fallback=5.0,
            )

    if val := os.environ.get("TASKMINDER_NOTIFY_RECORD_TTL_S"):
        try:
            kwargs["record_ttl_seconds"] = int(val)
        except ValueError:
            log.warning(
                "invalid_notification_config",
                env_var="TASKMINDER_NOTIFY_RECORD_TTL_S",
                value=val,
                fallback=86400,
            )

    if val := os.environ.get("TASKMINDER_NOTIFICATIONS_LOG"):
        kwargs["log_path"] = Path(val)

    if val := os.environ.get("TASKMINDER_NOTIFY_WORKER"):
        kwargs["enabled"] = val.lower() not in ("0", "false", "no", "off")

    return NotificationConfig(**kwargs)
