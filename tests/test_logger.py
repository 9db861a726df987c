"""Tests for the logging context helper."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import structlog

from email_sync.utils.logger import get_logger, log_context


class TestLogContext(unittest.TestCase):
    def setUp(self):
        structlog.contextvars.clear_contextvars()

    def test_fields_bound_inside_block_only(self):
        with log_context(account_id="acc-1", organization_id="org-1"):
            self.assertEqual(
                structlog.contextvars.get_contextvars(),
                {"account_id": "acc-1", "organization_id": "org-1"},
            )
        self.assertEqual(structlog.contextvars.get_contextvars(), {})

    def test_outer_fields_restored_after_nested_block(self):
        with log_context(command="sync"):
            with log_context(account_id="acc-2"):
                self.assertEqual(structlog.contextvars.get_contextvars()["account_id"], "acc-2")
            self.assertEqual(structlog.contextvars.get_contextvars(), {"command": "sync"})

    def test_context_cleared_when_block_raises(self):
        with self.assertRaises(RuntimeError):
            with log_context(account_id="acc-3"):
                raise RuntimeError("boom")
        self.assertEqual(structlog.contextvars.get_contextvars(), {})

    def test_get_logger_returns_usable_logger(self):
        logger = get_logger("email_sync.test")
        with log_context(account_id="acc-4"):
            logger.debug("test.event", value=1)


if __name__ == "__main__":
    unittest.main()
