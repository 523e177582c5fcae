"""Checks that can veto a suspend after the low-load streak completes.

User sessions come from utmp via ``psutil.users()``, so SSH and local logins
both count. Terminals listed in ``IGNORED_TERMINALS`` (for example the shell
the daemon was started from) are skipped. logind session state is not
consulted.
"""
from __future__ import annotations

import logging
from typing import Optional

import psutil

from .config import Config


class ActivityGuard:
    """Decide whether something on the host should keep it awake."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._logger = logging.getLogger(__name__)
        self._watched = {name.lower() for name in config.activity_processes}
        self._ignored_terminals = set(config.ignored_terminals)

    def override_active(self) -> bool:
        path = self._config.no_sleep_file
        return path is not None and path.exists()

    def active_user(self) -> Optional[str]:
        """Return the first logged-in user session, if any."""
        for session in psutil.users():
            if session.terminal and session.terminal in self._ignored_terminals:
                continue
            return f"{session.name} on {session.terminal or '?'}"
        return None

    def active_process(self) -> Optional[str]:
        """Return the name of a running process from the watch list, if any."""
        if not self._watched:
            return None

        for proc in psutil.process_iter(['name']):
            try:
                proc_name = proc.info['name']
                if proc_name and proc_name.lower() in self._watched:
                    return proc_name
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

        return None

    def blocking_reason(self) -> Optional[str]:
        """Return a human-readable reason to skip suspending, or None."""

        if self.override_active():
            return f"Override file '{self._config.no_sleep_file}' found"

        if not self._config.enable_activity_check:
            return None

        if self._config.check_user_sessions:
            user = self.active_user()
            if user:
                return f"Active user session detected ({user})"

        process = self.active_process()
        if process:
            return f"Activity process detected ({process})"

        self._logger.debug("No activity detected")
        return None
