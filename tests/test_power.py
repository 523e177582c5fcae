import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from autosuspend.power import (
    PrivilegeError,
    SuspendError,
    ensure_privileges,
    ensure_suspend_available,
    suspend_system,
)


class SuspendSystemTests(unittest.TestCase):
    def test_systemctl_success(self) -> None:
        with patch("autosuspend.power.subprocess.run") as run:
            suspend_system("systemctl")
        run.assert_called_once_with(["systemctl", "suspend"], check=True)

    def test_systemctl_failure(self) -> None:
        error = subprocess.CalledProcessError(1, ["systemctl", "suspend"])
        with patch("autosuspend.power.subprocess.run", side_effect=error):
            with self.assertRaises(SuspendError):
                suspend_system("systemctl")

    def test_systemctl_missing_binary(self) -> None:
        with patch("autosuspend.power.subprocess.run", side_effect=FileNotFoundError("systemctl")):
            with self.assertRaises(SuspendError):
                suspend_system("systemctl")

    def test_sysfs_writes_mem(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            state = Path(tmp) / "state"
            state.write_text("freeze mem disk\n", encoding="utf-8")
            suspend_system("sysfs", state_path=state)
            self.assertEqual(state.read_text(encoding="utf-8"), "mem")

    def test_sysfs_failure(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SuspendError):
                suspend_system("sysfs", state_path=Path(tmp) / "missing" / "state")

    def test_unknown_method(self) -> None:
        with self.assertRaises(SuspendError):
            suspend_system("hibernate")


class AvailabilityTests(unittest.TestCase):
    def test_systemctl_found(self) -> None:
        with patch("autosuspend.power.shutil.which", return_value="/usr/bin/systemctl"):
            ensure_suspend_available("systemctl")

    def test_systemctl_not_found(self) -> None:
        with patch("autosuspend.power.shutil.which", return_value=None):
            with self.assertRaises(SuspendError):
                ensure_suspend_available("systemctl")

    def test_sysfs_supports_mem(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            state = Path(tmp) / "state"
            state.write_text("freeze mem disk\n", encoding="utf-8")
            ensure_suspend_available("sysfs", state_path=state)

    def test_sysfs_without_mem(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            state = Path(tmp) / "state"
            state.write_text("freeze disk\n", encoding="utf-8")
            with self.assertRaises(SuspendError):
                ensure_suspend_available("sysfs", state_path=state)


class PrivilegeTests(unittest.TestCase):
    def test_root_passes(self) -> None:
        with patch("autosuspend.power.os.geteuid", return_value=0):
            ensure_privileges()

    def test_non_root_fails(self) -> None:
        with patch("autosuspend.power.os.geteuid", return_value=1000):
            with self.assertRaises(PrivilegeError):
                ensure_privileges()


if __name__ == "__main__":
    unittest.main()
