import json
import logging

from doggo_core.logger import get_logger


def test_json_lines_to_file(tmp_path):
    path = tmp_path / "logs" / "doggo.log"
    log = get_logger("Doggo.Test.File", to_file=str(path))
    log.info('[TEST] fetched "the ball"')

    entry = json.loads(path.read_text().splitlines()[-1])
    assert entry["msg"] == '[TEST] fetched "the ball"'
    assert entry["level"] == "INFO"
    assert entry["name"] == "Doggo.Test.File"
    assert entry["ts"].endswith("Z")


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("DOGGO_LOG_LEVEL", "warning")
    assert get_logger("Doggo.Test.Env").level == logging.WARNING
    assert get_logger("Doggo.Test.Env", level=logging.DEBUG).level == logging.DEBUG


def test_handlers_attached_once():
    first = get_logger("Doggo.Test.Once")
    second = get_logger("Doggo.Test.Once")
    assert first is second
    assert len(second.handlers) == 1
