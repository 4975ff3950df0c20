import importlib
import sys
import builtins
import types
import logging
from pathlib import Path

import pytest


def _reload_config():
    sys.modules.pop("doccrawl.config", None)
    return importlib.import_module("doccrawl.config")


@pytest.fixture(autouse=True)
def _fresh_config_module():
    yield
    # later importers should see a config built from the real environment
    sys.modules.pop("doccrawl.config", None)


def test_missing_dotenv_logs_warning(monkeypatch, caplog):
    orig_import = builtins.__import__

    def fake_import(name, globals=None, locals=None, fromlist=(), level=0):
        if name == "dotenv" or name.startswith("dotenv."):
            raise ImportError
        return orig_import(name, globals, locals, fromlist, level)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    caplog.set_level(logging.WARNING)
    _reload_config()
    assert "python-dotenv not available" in caplog.text

    # environment fallback works
    monkeypatch.setenv("USER_AGENT", "X-Agent")
    cfg = _reload_config()
    assert cfg.USER_AGENT == "X-Agent"


def test_dotenv_present_but_fails_to_load(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("USER_AGENT=FromFile")
    monkeypatch.chdir(tmp_path)

    fake = types.SimpleNamespace(load_dotenv=lambda: False)
    monkeypatch.setitem(sys.modules, "dotenv", fake)
    with pytest.raises(RuntimeError):
        _reload_config()


def test_dotenv_loads_sets_variables(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("DEFAULT_MAX_PAGES=42\n")
    monkeypatch.chdir(tmp_path)

    def fake_load():
        # emulate dotenv behavior: read .env and set os.environ
        for line in Path(".env").read_text().splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                monkeypatch.setenv(k, v)
        return True

    fake = types.SimpleNamespace(load_dotenv=fake_load)
    monkeypatch.setitem(sys.modules, "dotenv", fake)
    cfg = _reload_config()
    assert cfg.DEFAULT_MAX_PAGES == 42
    assert cfg.get_int_env("DEFAULT_MAX_PAGES", 500) == 42


def test_env_helpers_fall_back_on_bad_values(monkeypatch, caplog):
    cfg = _reload_config()
    monkeypatch.setenv("DOCCRAWL_TEST_INT", "not-a-number")
    monkeypatch.setenv("DOCCRAWL_TEST_FLOAT", "")
    monkeypatch.setenv("DOCCRAWL_TEST_BOOL", "Yes")

    assert cfg.get_int_env("DOCCRAWL_TEST_INT", 7) == 7
    assert "Invalid DOCCRAWL_TEST_INT" in caplog.text
    assert cfg.get_float_env("DOCCRAWL_TEST_FLOAT", 1.5) == 1.5
    assert cfg.get_optional_float_env("DOCCRAWL_TEST_FLOAT") is None
    assert cfg.get_bool_env("DOCCRAWL_TEST_BOOL", False) is True
    assert cfg.get_optional_str_env("DOCCRAWL_TEST_MISSING") is None
