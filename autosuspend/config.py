"""Application configuration loading utilities."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import os
import re

from dotenv import load_dotenv


BOOL_TRUE = {"1", "true", "yes", "on", "y"}
BOOL_FALSE = {"0", "false", "no", "off", "n"}

SUSPEND_METHODS = ("systemctl", "sysfs")
DEFAULT_ACTIVITY_PROCESSES = "Xorg,gnome-shell,kwin_wayland,apt,rsync,borg"

MIN_CHECK_INTERVAL = 10
MIN_CONSECUTIVE_CHECKS = 1

_DECIMAL_LITERAL = re.compile(r"^([0-9]+(\.[0-9]*)?|\.[0-9]+)$")
_INTEGER_LITERAL = re.compile(r"^[0-9]+$")


class ConfigError(RuntimeError):
    """Raised when configuration loading fails."""


@dataclass(slots=True)
class Config:
    """Strongly-typed configuration values for the suspend daemon."""

    load_threshold_ratio: float = 0.5
    check_interval: int = 300
    consecutive_checks_required: int = 3

    suspend_method: str = "systemctl"

    no_sleep_file: Optional[Path] = Path("/tmp/no_auto_suspend")
    enable_activity_check: bool = False
    check_user_sessions: bool = True
    ignored_terminals: List[str] = field(default_factory=list)
    activity_processes: List[str] = field(
        default_factory=lambda: _split_csv(DEFAULT_ACTIVITY_PROCESSES)
    )

    log_level: str = "INFO"
    log_file: Path = Path("/var/log/auto_suspend.log")

    def describe(self) -> str:
        return (
            f"Load Threshold Ratio={self.load_threshold_ratio}, "
            f"Check Interval={self.check_interval}s, "
            f"Consecutive Checks={self.consecutive_checks_required}, "
            f"Suspend Method={self.suspend_method}"
        )


def _str_to_bool(raw: str, *, var_name: str) -> bool:
    value = raw.strip().lower()
    if value in BOOL_TRUE:
        return True
    if value in BOOL_FALSE:
        return False
    raise ConfigError(f"Invalid boolean value '{raw}' for {var_name}")


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(',') if item.strip()]


def _parse_ratio(raw: str, *, var_name: str) -> float:
    value = raw.strip()
    if not _DECIMAL_LITERAL.match(value):
        raise ConfigError(
            f"Invalid value '{raw}' for {var_name}: expected a non-negative decimal number"
        )
    ratio = float(value)
    if ratio <= 0:
        raise ConfigError(f"{var_name} must be greater than zero (got {raw})")
    return ratio


def _parse_int(raw: str, *, var_name: str, minimum: int) -> int:
    value_text = raw.strip()
    if not _INTEGER_LITERAL.match(value_text):
        raise ConfigError(f"Invalid integer value '{raw}' for {var_name}")
    value = int(value_text)
    if value < minimum:
        raise ConfigError(f"{var_name} must be at least {minimum} (got {value})")
    return value


def load_config(env_file: str | None = None) -> Config:
    """Load configuration from environment and optional .env file."""

    if env_file is not None:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    env = os.environ

    load_threshold_ratio = _parse_ratio(
        env.get("LOAD_THRESHOLD_RATIO", "0.5"),
        var_name="LOAD_THRESHOLD_RATIO",
    )
    check_interval = _parse_int(
        env.get("CHECK_INTERVAL", "300"),
        var_name="CHECK_INTERVAL",
        minimum=MIN_CHECK_INTERVAL,
    )
    consecutive_checks_required = _parse_int(
        env.get("CONSECUTIVE_CHECKS_REQUIRED", "3"),
        var_name="CONSECUTIVE_CHECKS_REQUIRED",
        minimum=MIN_CONSECUTIVE_CHECKS,
    )

    suspend_method = env.get("SUSPEND_METHOD", "systemctl").strip().lower()
    if suspend_method not in SUSPEND_METHODS:
        raise ConfigError(
            f"Invalid SUSPEND_METHOD '{suspend_method}'. "
            f"Expected one of: {', '.join(SUSPEND_METHODS)}"
        )

    # An empty NO_SLEEP_FILE disables the override check
    raw_no_sleep_file = env.get("NO_SLEEP_FILE", "/tmp/no_auto_suspend").strip()
    no_sleep_file = Path(raw_no_sleep_file) if raw_no_sleep_file else None

    enable_activity_check = _str_to_bool(
        env.get("ENABLE_ACTIVITY_CHECK", "false"),
        var_name="ENABLE_ACTIVITY_CHECK",
    )
    check_user_sessions = _str_to_bool(
        env.get("CHECK_USER_SESSIONS", "true"),
        var_name="CHECK_USER_SESSIONS",
    )
    ignored_terminals = _split_csv(env.get("IGNORED_TERMINALS", ""))
    activity_processes = _split_csv(env.get("ACTIVITY_PROCESSES", DEFAULT_ACTIVITY_PROCESSES))

    log_level = env.get("LOG_LEVEL", "INFO").upper()
    log_file = Path(env.get("LOG_FILE", "/var/log/auto_suspend.log"))

    return Config(
        load_threshold_ratio=load_threshold_ratio,
        check_interval=check_interval,
        consecutive_checks_required=consecutive_checks_required,
        suspend_method=suspend_method,
        no_sleep_file=no_sleep_file,
        enable_activity_check=enable_activity_check,
        check_user_sessions=check_user_sessions,
        ignored_terminals=ignored_terminals,
        activity_processes=activity_processes,
        log_level=log_level,
        log_file=log_file,
    )
