"""Runtime settings, read from the environment and overridden by CLI flags."""
import os
from dataclasses import dataclass

DEFAULT_INPUT = "airlines-json-per-line"
DEFAULT_BACKEND = "json"
DEFAULT_STRING_THRESHOLD = 10
DEFAULT_SETTLE_SECONDS = 1.0
DEFAULT_LOG_LEVEL = "WARNING"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


@dataclass
class ProfilerConfig:
    input_path: str = DEFAULT_INPUT
    backend: str = DEFAULT_BACKEND
    string_threshold: int = DEFAULT_STRING_THRESHOLD
    settle_seconds: float = DEFAULT_SETTLE_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ProfilerConfig":
        """Build a config from JSONSHAPE_* variables; DEBUG=1 forces debug logging."""
        log_level = os.environ.get("JSONSHAPE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if os.environ.get("DEBUG", "") not in ("", "0"):
            log_level = "DEBUG"
        return cls(
            input_path=os.environ.get("JSONSHAPE_INPUT", DEFAULT_INPUT),
            backend=os.environ.get("JSONSHAPE_BACKEND", DEFAULT_BACKEND),
            string_threshold=_env_int("JSONSHAPE_STRING_THRESHOLD", DEFAULT_STRING_THRESHOLD),
            settle_seconds=_env_float("JSONSHAPE_SETTLE_SECONDS", DEFAULT_SETTLE_SECONDS),
            log_level=log_level,
        )
