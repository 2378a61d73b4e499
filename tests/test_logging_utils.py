import argparse
import logging

import pytest

from logging_utils import (
    LOG_LEVEL_ENV_VAR,
    add_logging_args,
    resolve_log_level,
    uvicorn_log_level,
)


class TestResolveLogLevel:
    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "error")
        assert resolve_log_level("DEBUG", verbose=0, quiet=3) == logging.DEBUG

    def test_default_is_info(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
        assert resolve_log_level() == logging.INFO

    def test_environment_fallback(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "warning")
        assert resolve_log_level() == logging.WARNING

    def test_unknown_environment_value(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "loud")
        assert resolve_log_level() == logging.INFO

    @pytest.mark.parametrize(
        "verbose, quiet, expected",
        [
            (1, 0, logging.DEBUG),
            (2, 0, logging.DEBUG),
            (0, 1, logging.WARNING),
            (0, 2, logging.ERROR),
            (1, 1, logging.INFO),
        ],
    )
    def test_modifiers(self, monkeypatch, verbose, quiet, expected):
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
        assert resolve_log_level(verbose=verbose, quiet=quiet) == expected


def test_uvicorn_log_level():
    assert uvicorn_log_level(logging.WARNING) == "warning"
    assert uvicorn_log_level(5) == "info"


def test_add_logging_args():
    parser = argparse.ArgumentParser()
    add_logging_args(parser)
    args = parser.parse_args(["-vv", "--log-level", "error"])
    assert args.verbose == 2
    assert args.log_level == "error"
    with pytest.raises(SystemExit):
        parser.parse_args(["--log-level", "loud"])
