"""Process configuration read from environment variables (.env is loaded by server.py)."""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from msgrelay.stream_subscriber import DEFAULT_QUEUE_MAX_SIZE

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def _float_or_none(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        parsed = float(value)
    except (ValueError, TypeError):
        return None
    return parsed if parsed > 0 else None


def _int_or_default(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except (ValueError, TypeError):
        return default


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    address: Optional[str] = None
    ping_interval: Optional[float] = None
    reset_interval: Optional[float] = None
    subscriber_queue_max_size: int = DEFAULT_QUEUE_MAX_SIZE
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def keepalive_enabled(self) -> bool:
        return bool(self.address and self.ping_interval)

    @property
    def idle_check_interval(self) -> Optional[float]:
        """Idle checks piggyback on the ping interval when one is set."""
        if self.reset_interval is None:
            return None
        return self.ping_interval or self.reset_interval

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        address = (env.get("ADDRESS") or "").strip().rstrip("/") or None
        origins = [o.strip() for o in (env.get("CORS_ORIGINS") or "*").split(",") if o.strip()]
        return cls(
            host=(env.get("HOST") or DEFAULT_HOST).strip(),
            port=_int_or_default(env.get("PORT"), DEFAULT_PORT),
            address=address,
            ping_interval=_float_or_none(env.get("PING_INTERVAL_SECONDS")),
            reset_interval=_float_or_none(env.get("RESET_INTERVAL_SECONDS")),
            subscriber_queue_max_size=_int_or_default(
                env.get("SUBSCRIBER_QUEUE_MAX_SIZE"), DEFAULT_QUEUE_MAX_SIZE
            ),
            cors_origins=origins or ["*"],
        )
