"""Shared pytest fixtures."""

from __future__ import annotations

import os
from typing import Iterator

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from webide.editor.save_status import SaveStatusIndicator
from webide.editor.workspace import Workspace
from webide.services.blob_store import InMemoryBlobStore
from webide.services.persistence import PersistenceGateway
from webide.utils import logging as logging_utils

from helpers import FakeClock


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "WEBIDE_LOG_DIR",
        "WEBIDE_STORAGE_PATH",
        "WEBIDE_STORAGE_KEY",
        "WEBIDE_DEBUG_LOGGING",
        "WEBIDE_SAVED_STATUS_SECONDS",
        "WEBIDE_ERROR_STATUS_SECONDS",
        "WEBIDE_DEBUG",
        "WEBIDE_SETTINGS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    logging_utils.reset_logging()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def gateway(blob_store: InMemoryBlobStore) -> PersistenceGateway:
    return PersistenceGateway(blob_store)


@pytest.fixture
def workspace(gateway: PersistenceGateway, clock: FakeClock) -> Workspace:
    return Workspace.create(gateway, status=SaveStatusIndicator(clock=clock))
