from __future__ import annotations

import logging

from dotlayers.core.logging_config import configure_logging, reset_logging_for_tests


def _package_logger() -> logging.Logger:
    return logging.getLogger("dotlayers")


def test_configure_installs_single_stream_handler() -> None:
    configure_logging()
    configure_logging()

    logger = _package_logger()
    assert len(logger.handlers) == 1
    assert logger.propagate is False
    assert logger.level == logging.INFO


def test_verbose_and_quiet_levels() -> None:
    configure_logging(verbose=True)
    assert _package_logger().level == logging.DEBUG

    configure_logging(quiet=True)
    assert _package_logger().level == logging.WARNING


def test_log_file_receives_debug(tmp_path) -> None:
    log_path = tmp_path / "logs" / "run.log"
    configure_logging(quiet=True, log_path=log_path)

    logging.getLogger("dotlayers.test").debug("hidden from stderr")
    reset_logging_for_tests()

    assert "hidden from stderr" in log_path.read_text(encoding="utf-8")


def test_reset_restores_propagation() -> None:
    configure_logging()
    reset_logging_for_tests()

    logger = _package_logger()
    assert logger.handlers == []
    assert logger.propagate is True
    assert logger.level == logging.NOTSET


def test_foreign_handlers_survive() -> None:
    foreign = logging.NullHandler()
    _package_logger().addHandler(foreign)
    try:
        configure_logging()
        reset_logging_for_tests()
        assert foreign in _package_logger().handlers
    finally:
        _package_logger().removeHandler(foreign)
