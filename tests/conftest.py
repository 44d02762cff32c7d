from __future__ import annotations

import pytest
from loguru import logger

from core.config import get_settings


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Isolate Settings from the host environment and app.properties."""
    for key in (
        "POD_NAMESPACE",
        "STATUS_SERVER",
        "SCENARIO_NAME",
        "CONFIG_FILE",
        "KUBECONFIG",
        "SCENARIO_LABEL",
        "POLL_INTERVAL",
        "STAGE_TIMEOUT",
        "WEBHOOK_TIMEOUT",
        "LOG_LEVEL",
        "LOG_FILE",
        "LOG_SERIALIZE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
