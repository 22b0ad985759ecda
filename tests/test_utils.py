import json
import logging
import logging.handlers

import pytest

from utils import config_section, load_config, setup_logging


def test_load_config_reads_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'simulation_parameters': {'seed': 1}}))
    assert load_config(str(path)) == {'simulation_parameters': {'seed': 1}}


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_requires_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_load_config_warns_on_unknown_sections(tmp_path, caplog):
    path = tmp_path / "extra.json"
    path.write_text(json.dumps({'camera': {}, 'gravity': {}}))
    with caplog.at_level(logging.WARNING):
        load_config(str(path))
    assert "gravity" in caplog.text


def test_config_section_defaults_to_empty():
    assert config_section({}, 'camera') == {}
    with pytest.raises(ValueError):
        config_section({'camera': 3}, 'camera')


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_creates_rotating_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"
    setup_logging({'logging': {'level': 'debug', 'log_file': str(log_file)}})
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert log_file.exists()


def test_setup_logging_without_file(restore_root_logger):
    setup_logging({'logging': {'log_file': None}})
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
