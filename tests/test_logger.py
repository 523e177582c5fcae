import io
import logging
import re
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from autosuspend.config import Config
from autosuspend.logger import setup_logging


LINE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} - (INFO|WARNING|ERROR): .+$")


class SetupLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        saved_handlers = list(root.handlers)
        saved_level = root.level

        def restore() -> None:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

        self.addCleanup(restore)
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.log_file = Path(self._tmp.name) / "logs" / "auto_suspend.log"

    def test_routes_by_level_and_appends_to_file(self) -> None:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            setup_logging(Config(log_file=self.log_file))
            log = logging.getLogger("autosuspend.test")
            log.info("Current 5-min load average: 0.10")
            log.warning("Suspend prevented")
            log.error("'systemctl suspend' failed")

        self.assertIn("INFO: Current 5-min load average: 0.10", stdout.getvalue())
        self.assertNotIn("Suspend prevented", stdout.getvalue())
        self.assertNotIn("failed", stdout.getvalue())

        self.assertIn("WARNING: Suspend prevented", stderr.getvalue())
        self.assertIn("ERROR: 'systemctl suspend' failed", stderr.getvalue())
        self.assertNotIn("load average", stderr.getvalue())

        lines = self.log_file.read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 3)
        for line in lines:
            self.assertRegex(line, LINE_PATTERN)

    def test_file_is_appended_across_setups(self) -> None:
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            setup_logging(Config(log_file=self.log_file))
            logging.getLogger("autosuspend.test").info("first")
            setup_logging(Config(log_file=self.log_file))
            logging.getLogger("autosuspend.test").info("second")

        content = self.log_file.read_text(encoding="utf-8")
        self.assertIn("first", content)
        self.assertIn("second", content)

    def test_debug_suppressed_at_info_level(self) -> None:
        stdout = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(io.StringIO()):
            setup_logging(Config(log_file=self.log_file, log_level="INFO"))
            logging.getLogger("autosuspend.test").debug("hidden")
        self.assertNotIn("hidden", stdout.getvalue())


if __name__ == "__main__":
    unittest.main()
