import logging

import pytest

from content_enhancer.logging_setup import NOISY_LOGGERS, configure_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_configure_logging_writes_to_requested_directory(tmp_path, restore_root_logging):
    log_path = configure_logging("debug", log_dir=tmp_path / "logs")

    logging.getLogger("content_enhancer.test").debug("extraction finished")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path.parent == tmp_path / "logs"
    assert logging.getLogger().level == logging.DEBUG
    assert "extraction finished" in log_path.read_text(encoding="utf-8")


def test_configure_logging_quietens_client_libraries(tmp_path, restore_root_logging):
    configure_logging("INFO", log_dir=tmp_path)
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_unknown_level_falls_back_to_info(tmp_path, restore_root_logging):
    configure_logging("chatty", log_dir=tmp_path)
    assert logging.getLogger().level == logging.INFO
