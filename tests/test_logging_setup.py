import logging

from viesvat.utils.logging_setup import HANDLER_NAME, setup_logger


def test_setup_logger_is_idempotent() -> None:
    first = setup_logger()
    handler_count = len(first.handlers)
    second = setup_logger()

    assert first is second
    assert first.name == "viesvat"
    assert first.propagate is False
    assert len(second.handlers) == handler_count
    assert [h.get_name() for h in first.handlers].count(HANDLER_NAME) == 1


def test_level_is_only_changed_when_requested() -> None:
    logger = setup_logger(logging.DEBUG)
    try:
        assert setup_logger().level == logging.DEBUG
        assert logger.getChild("client").getEffectiveLevel() == logging.DEBUG
    finally:
        setup_logger(logging.INFO)
