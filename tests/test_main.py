from contextlib import asynccontextmanager

import pytest

from ddb_key_export import main as main_module
from ddb_key_export.errors import StoreConnectionError
from tests.fakes import FakeDynamoClient, string_item, throttled


@pytest.fixture
def fake_store(monkeypatch):
    """Replace client construction with a fake DynamoDB client."""
    state = {"pages": [], "error": None, "profiles": [], "client": None}

    @asynccontextmanager
    async def fake_build_client(profile):
        state["profiles"].append(profile.profile_name)
        state["client"] = FakeDynamoClient(state["pages"], state["error"])
        yield state["client"]

    monkeypatch.setattr(main_module, "build_client", fake_build_client)
    return state


def test_main_exports_keys(export_env, fake_store, tmp_path, capsys):
    output = tmp_path / "out" / "dynamodb_items.csv"
    fake_store["pages"] = [
        {"Items": [string_item("id", "a"), string_item("id", "b")]},
        {"Items": [string_item("name", "c")]},
    ]

    assert main_module.main(["--output", str(output)]) == 0

    assert output.read_text(encoding="utf-8").splitlines() == ["a", "b"]
    assert fake_store["profiles"] == ["exporter"]
    assert fake_store["client"].paginator.requests[0]["TableName"] == "users"
    assert "Primary keys have been written to CSV file" in capsys.readouterr().out


def test_missing_profile_aborts_before_scan(export_env, fake_store, monkeypatch, tmp_path):
    monkeypatch.delenv("AWS_PROFILE")
    output = tmp_path / "keys.csv"
    output.write_text("existing\n", encoding="utf-8")

    assert main_module.main(["--output", str(output)]) == 2

    assert fake_store["profiles"] == []
    assert output.read_text(encoding="utf-8") == "existing\n"


def test_partial_scan_still_exits_zero(export_env, fake_store, tmp_path):
    output = tmp_path / "keys.csv"
    fake_store["pages"] = [{"Items": [string_item("id", "a")]}]
    fake_store["error"] = throttled()

    assert main_module.main(["--output", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == "a\n"


@pytest.mark.parametrize("use_env", [True, False])
def test_strict_scan_failure_exits_nonzero(export_env, fake_store, monkeypatch, tmp_path, use_env):
    output = tmp_path / "keys.csv"
    fake_store["pages"] = [{"Items": [string_item("id", "a")]}]
    fake_store["error"] = throttled()
    argv = ["--output", str(output)]
    if use_env:
        monkeypatch.setenv("DYNAMODB_SCAN_STRICT", "true")
    else:
        argv.append("--strict")

    assert main_module.main(argv) == 1
    assert not output.exists()


def test_connection_error_exits_nonzero(export_env, monkeypatch, tmp_path):
    @asynccontextmanager
    async def failing_build_client(profile):
        raise StoreConnectionError(f"cannot load AWS profile {profile.profile_name!r}")
        yield

    monkeypatch.setattr(main_module, "build_client", failing_build_client)
    output = tmp_path / "keys.csv"

    assert main_module.main(["--output", str(output)]) == 1
    assert not output.exists()


def test_write_error_exits_nonzero(export_env, fake_store, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    fake_store["pages"] = [{"Items": [string_item("id", "a")]}]

    assert main_module.main(["--output", str(blocker / "keys.csv")]) == 1
