"""
Tests for the package logging setup.

Run with: pytest src/softrepo/logger_test.py -v
"""
import logging

from softrepo.logger import configure_logging, get_logger


def stream_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]


def test_library_only_attaches_null_handler():
    package_logger = logging.getLogger("softrepo")

    get_logger("softrepo.repository.db_repository")

    assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)
    assert stream_handlers(package_logger) == []
    assert package_logger.propagate is True


def test_records_reach_root_handlers_once(caplog):
    with caplog.at_level(logging.INFO):
        get_logger("softrepo.repository.db_repository").info("Inserted %s #%s", "users", 1)

    assert [r.getMessage() for r in caplog.records] == ["Inserted users #1"]


def test_configure_logging_is_idempotent():
    package_logger = logging.getLogger("softrepo")

    configure_logging("debug")
    configure_logging("debug")

    assert len(stream_handlers(package_logger)) == 1
    assert package_logger.level == logging.DEBUG
    # Records stop here so a configured root logger does not repeat them
    assert package_logger.propagate is False
