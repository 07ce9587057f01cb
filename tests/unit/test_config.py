from __future__ import annotations

from portal_messaging.config import settings


def test_settings_loaded_from_test_env():
    assert settings.STORAGE_BACKEND == "memory"
    assert settings.SEED_DEMO_DATA is False
    assert settings.LOG_LEVEL == "WARNING"
    assert settings.BLOB_STORE_DIR == "./var/test-blobs"
