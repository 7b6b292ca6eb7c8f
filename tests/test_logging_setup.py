"""Tests for logging_setup and the audit log."""

import logging

from extreg.logging_setup import get_security_logger, setup_logging, verbosity_for_level
from extreg.security.audit_log import AuditLogger


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_default_level_is_info(self):
        logger = setup_logging(verbosity=0)
        assert logger.handlers[0].level == logging.INFO

    def test_verbose_enables_debug(self):
        logger = setup_logging(verbosity=1)
        assert logger.handlers[0].level == logging.DEBUG

    def test_quiet_sets_warning(self):
        logger = setup_logging(verbosity=-1)
        assert logger.handlers[0].level == logging.WARNING

    def test_file_handler_added(self, tmp_path):
        logger = setup_logging(log_file=tmp_path / "extreg.log")
        assert len(logger.handlers) == 2
        file_handler = [h for h in logger.handlers if isinstance(h, logging.FileHandler)][0]
        assert file_handler.level == logging.DEBUG
        file_handler.close()

    def test_security_logger_is_child(self):
        root = setup_logging()
        assert get_security_logger().name == "extreg.security"
        assert get_security_logger().parent is root

    def test_verbosity_for_level(self):
        assert verbosity_for_level("debug") == 1
        assert verbosity_for_level("INFO") == 0
        assert verbosity_for_level("warning") == -1


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_and_filter(self, tmp_path):
        audit = AuditLogger(tmp_path)
        audit.log_event("admin@example.com", "approve", "submission", "s1")
        audit.log_event("admin@example.com", "reject", "submission", "s2")
        audit.log_event("pipeline", "security_violation", "submission", "s2", success=False)

        assert len(audit.get_events()) == 3
        assert [e.resource_id for e in audit.get_events(action="approve")] == ["s1"]
        assert {e.action for e in audit.get_events(resource_id="s2")} == {"reject", "security_violation"}
        assert [e.action for e in audit.get_events(actor="pipeline")] == ["security_violation"]

    def test_malformed_lines_skipped(self, tmp_path):
        audit = AuditLogger(tmp_path)
        audit.log_event("a", "approve", "submission", "s1")
        (tmp_path / "2000-01-01.jsonl").write_text("not json\n")
        assert len(audit.get_events()) == 1
