import pytest

from ddb_key_export.config import ScanConfig


@pytest.fixture
def scan_config(tmp_path):
    config = ScanConfig.new("users", "id")
    config.output_file = str(tmp_path / "out" / "keys.csv")
    return config


@pytest.fixture
def export_env(monkeypatch):
    monkeypatch.setenv("DYNAMODB_TABLE_NAME", "users")
    monkeypatch.setenv("DYNAMODB_PRIMARY_KEY_NAME", "id")
    monkeypatch.setenv("AWS_PROFILE", "exporter")
    monkeypatch.delenv("DYNAMODB_SCAN_STRICT", raising=False)
