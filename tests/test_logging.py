"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from core.logging import _drop_secrets, configure_logging


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


def test_drop_secrets_masks_credentials() -> None:
    event = {"event": "login", "password": "hunter2", "Access_Token": "abc", "email": "a@b.c"}
    cleaned = _drop_secrets(None, "info", event)
    assert cleaned["password"] == "***"
    assert cleaned["Access_Token"] == "***"
    assert cleaned["email"] == "a@b.c"


def test_json_output_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    logger = configure_logging("lifesync-test", log_level="INFO", json_format=True)
    logger.info("hello", password="secret", attempt=1)

    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["event"] == "hello"
    assert record["password"] == "***"
    assert record["level"] == "info"


def test_level_filtering(capsys: pytest.CaptureFixture[str]) -> None:
    logger = configure_logging("lifesync-test", log_level="WARNING", json_format=True)
    logger.info("quiet")
    logger.warning("loud")

    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "loud" in err
