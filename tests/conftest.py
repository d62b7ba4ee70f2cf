"""Shared fixtures for the spannerconn test suite."""

from __future__ import annotations

import pytest

from fakes import FakeCredentialsService


@pytest.fixture
def credentials_service() -> FakeCredentialsService:
    return FakeCredentialsService()


@pytest.fixture(autouse=True)
def _clear_project_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    monkeypatch.delenv("GCLOUD_PROJECT", raising=False)
