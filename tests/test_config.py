"""Tests for SyncSettings."""

import pytest

from cadsync.config import ExistenceCheckPolicy, SyncSettings
from cadsync.domain.errors import ValidationError


def test_defaults():
    settings = SyncSettings.from_env({})

    assert settings == SyncSettings()
    assert settings.existence_policy == ExistenceCheckPolicy.PERMISSIVE
    assert settings.preview_limit == 10
    assert settings.fee_category == "impuesto predial"
    assert settings.log_level == "WARNING"


def test_reads_environment():
    settings = SyncSettings.from_env(
        {
            "CADSYNC_EXISTENCE_POLICY": " Strict ",
            "CADSYNC_PREVIEW_LIMIT": "25",
            "CADSYNC_FEE_CATEGORY": "derecho de agua",
            "CADSYNC_LOG_LEVEL": "info",
        }
    )

    assert settings.existence_policy == ExistenceCheckPolicy.STRICT
    assert settings.preview_limit == 25
    assert settings.fee_category == "derecho de agua"
    assert settings.log_level == "INFO"


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("CADSYNC_PREVIEW_LIMIT", "3")

    assert SyncSettings.from_env().preview_limit == 3


def test_invalid_policy():
    with pytest.raises(ValidationError, match="CADSYNC_EXISTENCE_POLICY"):
        SyncSettings.from_env({"CADSYNC_EXISTENCE_POLICY": "lenient"})


@pytest.mark.parametrize("value", ["-1", "ten", ""])
def test_invalid_preview_limit(value):
    with pytest.raises(ValidationError, match="CADSYNC_PREVIEW_LIMIT"):
        SyncSettings.from_env({"CADSYNC_PREVIEW_LIMIT": value})


def test_zero_preview_limit_allowed():
    assert SyncSettings.from_env({"CADSYNC_PREVIEW_LIMIT": "0"}).preview_limit == 0


def test_empty_fee_category():
    with pytest.raises(ValidationError, match="CADSYNC_FEE_CATEGORY"):
        SyncSettings.from_env({"CADSYNC_FEE_CATEGORY": "   "})
