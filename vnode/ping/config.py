"""Ping configuration: Pydantic model and settings-driven controller factory."""

from typing import Any

from pydantic import BaseModel, Field

from vnode.contract import NodeProvider
from vnode.ping.controller import NodePingController
from vnode.settings import get_setting, load_settings

DEFAULT_PING_INTERVAL = 10.0


class PingConfig(BaseModel):
    """node.ping_interval / node.ping_timeout from settings.yaml, in seconds."""

    interval: float = Field(default=DEFAULT_PING_INTERVAL, gt=0)
    timeout: float | None = Field(default=None, gt=0)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "PingConfig":
        """Read the node section. Raises pydantic.ValidationError on bad values."""
        return cls.model_validate(
            {
                "interval": get_setting(
                    settings, "node.ping_interval", DEFAULT_PING_INTERVAL
                ),
                "timeout": get_setting(settings, "node.ping_timeout"),
            }
        )


def build_ping_controller(
    provider: NodeProvider, settings: dict[str, Any] | None = None
) -> NodePingController:
    """Controller configured from settings, or from config/settings.yaml when omitted."""
    if settings is None:
        settings = load_settings()
    cfg = PingConfig.from_settings(settings)
    return NodePingController(provider, interval=cfg.interval, timeout=cfg.timeout)
