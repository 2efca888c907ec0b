import json

from inktalk.chat_proxy.logging_utils import JsonlLogger


def test_jsonl_logger_rotates(tmp_path, monkeypatch):
    log_file = tmp_path / "logs" / "proxy.jsonl"
    logger = JsonlLogger(str(log_file), max_bytes=5)

    monkeypatch.setattr(
        "inktalk.chat_proxy.logging_utils.time.strftime",
        lambda *_: "19700101-000000",
    )

    logger.log({"status": 200})
    assert log_file.exists()

    logger.log({"status": 400, "model": "llama3-70b-8192"})

    rotated = log_file.with_name(log_file.name + ".19700101-000000")
    assert rotated.exists()
    assert json.loads(rotated.read_text().strip()) == {"status": 200}
    assert json.loads(log_file.read_text().strip())["status"] == 400


def test_jsonl_logger_creates_missing_directory(tmp_path):
    log_file = tmp_path / "missing" / "proxy.jsonl"
    JsonlLogger(str(log_file), max_bytes=100).log({"event": "ok"})
    assert log_file.exists()


def test_jsonl_logger_write_failure_is_not_raised(tmp_path, caplog):
    target = tmp_path / "is_a_dir"
    target.mkdir()
    JsonlLogger(str(target)).log({"event": "lost"})
    assert "Write failed" in caplog.text
