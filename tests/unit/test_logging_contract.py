"""
Tests specifically for logging contract enforcement.

No kwargs to logger; only extra={"context": {...}} allowed.
"""

import ast
import json
import logging
import sys
import unittest
from pathlib import Path
from typing import Any, Dict, List

from core.logging import ConsoleFormatter, StructuredFormatter, setup_logging

PROJECT_ROOT = Path(__file__).parent.parent.parent

CHECKED_MODULES = [
    "chains/gateway.py",
    "config/__init__.py",
    "discovery/enricher.py",
    "discovery/registry.py",
    "monitoring/scan_report.py",
    "strategy/pipeline.py",
    "strategy/jobs/run_scan.py",
]


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        """Find logger calls with invalid kwargs using AST."""
        violations = []
        tree = ast.parse(source_code)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call):
                continue
            if not isinstance(node.func, ast.Attribute):
                continue

            method_name = node.func.attr
            if method_name not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            is_logger = False
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()
            if not is_logger:
                continue

            for kw in node.keywords:
                if kw.arg and kw.arg not in self.ALLOWED_KWARGS:
                    violations.append({
                        "line": node.lineno,
                        "method": method_name,
                        "invalid_kwarg": kw.arg,
                    })

        return violations

    def test_modules_no_invalid_kwargs(self):
        """Scan modules pass only extra/exc_info to loggers."""
        for relpath in CHECKED_MODULES:
            with self.subTest(module=relpath):
                filepath = PROJECT_ROOT / relpath
                source = filepath.read_text(encoding="utf-8")

                violations = self._find_logger_violations(source)

                if violations:
                    msg = f"Found {len(violations)} logging violations in {relpath}:\n"
                    for v in violations:
                        msg += f"  Line {v['line']}: logger.{v['method']}(..., {v['invalid_kwarg']}=...)\n"
                    self.fail(msg)

    def test_detector_flags_kwargs(self):
        """Sanity check: the detector catches a violation."""
        violations = self._find_logger_violations("logger.info('x', pool='T1')\n")
        self.assertEqual(violations[0]["invalid_kwarg"], "pool")


class TestFormatters(unittest.TestCase):
    """Formatter output includes context."""

    def _record(self, context=None) -> logging.LogRecord:
        record = logging.LogRecord(
            name="poolscan.test",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Error processing pool %d",
            args=(3,),
            exc_info=None,
        )
        if context is not None:
            record.context = context
        return record

    def test_structured_formatter_json(self):
        line = StructuredFormatter().format(self._record({"index": 3, "pool": "T1"}))
        data = json.loads(line)

        self.assertEqual(data["level"], "WARNING")
        self.assertEqual(data["logger"], "poolscan.test")
        self.assertEqual(data["message"], "Error processing pool 3")
        self.assertEqual(data["context"], {"index": 3, "pool": "T1"})

    def test_console_formatter_context_summary(self):
        context = {"a": 1, "b": 2, "c": 3, "d": 4, "e": 5}
        line = ConsoleFormatter().format(self._record(context))

        self.assertIn("Error processing pool 3", line)
        self.assertIn("a=1", line)
        self.assertIn("(+1 more)", line)

    def test_console_formatter_traceback(self):
        try:
            raise ValueError("bad word")
        except ValueError:
            record = self._record()
            record.exc_info = sys.exc_info()

        line = ConsoleFormatter().format(record)

        self.assertIn("Traceback", line)
        self.assertIn("ValueError: bad word", line)

    def test_console_formatter_without_context(self):
        line = ConsoleFormatter().format(self._record())
        self.assertTrue(line.endswith("Error processing pool 3"))


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        for handler in logging.root.handlers[:]:
            handler.close()
            logging.root.removeHandler(handler)

    def test_json_log_file(self):
        import tempfile

        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "scan.log"
            setup_logging(level=logging.INFO, log_file=str(log_file), json_format=True)

            logging.getLogger("poolscan.test").info(
                "hello", extra={"context": {"matched": 1}}
            )
            for handler in logging.root.handlers:
                handler.flush()

            data = json.loads(log_file.read_text(encoding="utf-8").strip())
            self.assertEqual(data["message"], "hello")
            self.assertEqual(data["context"], {"matched": 1})

            for handler in logging.root.handlers[:]:
                handler.close()
                logging.root.removeHandler(handler)


class TestLoggingContextCapture(unittest.TestCase):
    """Tests that context is properly captured in log records."""

    def setUp(self):
        self.captured_records = []

        class CapturingHandler(logging.Handler):
            def __init__(self, records_list):
                super().__init__()
                self.records = records_list

            def emit(self, record):
                self.records.append(record)

        self.logger = logging.getLogger(f"test_capture_{id(self)}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers = []
        self.logger.addHandler(CapturingHandler(self.captured_records))

    def test_context_captured_in_record(self):
        self.logger.info(
            "Test message",
            extra={"context": {"key1": "value1", "key2": 123}}
        )

        record = self.captured_records[0]
        self.assertEqual(record.context["key1"], "value1")
        self.assertEqual(record.context["key2"], 123)

    def test_exc_info_with_context(self):
        try:
            raise ValueError("Test error")
        except ValueError:
            self.logger.error(
                "Caught error",
                exc_info=True,
                extra={"context": {"operation": "test"}}
            )

        record = self.captured_records[0]
        self.assertIsNotNone(record.exc_info)
        self.assertEqual(record.context["operation"], "test")


if __name__ == "__main__":
    unittest.main()
