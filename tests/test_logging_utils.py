import logging

from inktalk.logging_utils import configure_logging


def test_configure_logging_honours_env_override(monkeypatch, tmp_path):
    target_dir = tmp_path / "logs"
    monkeypatch.setenv("INKTALK_LOG_DIR", str(target_dir))

    log_path = configure_logging("unit_test", include_console=False)
    logging.getLogger(__name__).info("env override works")

    assert log_path == target_dir / "unit_test.log"
    assert "env override works" in log_path.read_text()


def test_configure_logging_replaces_previous_handlers(tmp_path):
    first_path = configure_logging(
        "first_run", log_dir=tmp_path / "logs", include_console=False
    )
    logging.getLogger(__name__).info("first run entry")

    second_path = configure_logging(
        "second_run", log_dir=tmp_path / "alt_logs", include_console=False
    )
    logging.getLogger(__name__).info("second run entry")

    assert "first run entry" in first_path.read_text()
    assert "second run entry" in second_path.read_text()
    assert "second run entry" not in first_path.read_text()


def test_configure_logging_accepts_level_names(tmp_path):
    log_path = configure_logging(
        "levels", level="warning", log_dir=tmp_path, include_console=False
    )
    logging.getLogger(__name__).info("hidden")
    logging.getLogger(__name__).warning("shown")

    text = log_path.read_text()
    assert "shown" in text
    assert "hidden" not in text
    assert logging.getLogger("httpx").level == logging.WARNING
