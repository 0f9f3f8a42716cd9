from __future__ import annotations

import json

import pytest

from lawverify import cli
from lawverify.app import VerificationApp
from lawverify.config.settings import Settings
from lawverify.database.manager import DEMO_LAWYERS
from lawverify.services.outcomes import Matched


@pytest.mark.anyio
@pytest.mark.parametrize("backend", ["memory", "sqlite"])
async def test_app_builds_services_for_each_backend(tmp_path, backend):
    settings = Settings(
        _env_file=None,
        STORAGE_BACKEND=backend,
        DATABASE_PATH=str(tmp_path / "app.db"),
        SEED_DEMO_DATA=True,
    )

    async with VerificationApp(settings) as app:
        outcome = await app.verification.verify("98765-7654321-9", "LTR-54321")
        assert outcome == Matched(full_name="Barrister Khalid Mehmood")
        assert len(await app.review.list_lawyers()) == len(DEMO_LAWYERS)

    assert app.db_manager is None


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STORAGE_BACKEND", "sqlite")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "cli.db"))
    monkeypatch.setenv("SEED_DEMO_DATA", "true")
    monkeypatch.setenv("LOG_FILE", "")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


def _run(capsys, *argv):
    code = cli.main(list(argv))
    return code, json.loads(capsys.readouterr().out)


def test_cli_verify_and_review(cli_env, capsys):
    code, body = _run(capsys, "verify", "12345-1234567-1", "LTR-12345")
    assert code == 0
    assert body == {"verified": True, "fullName": "Advocate Ayesha Siddiqi", "step": 5}

    code, body = _run(capsys, "verify", "22222-2222222-2", "LTR-22222")
    assert body["pending"] is True

    code, pending = _run(capsys, "pending")
    [item] = pending

    code, body = _run(capsys, "approve", str(item["id"]), "Jane Doe")
    assert code == 0 and body["success"] is True

    code, body = _run(capsys, "verify", "22222-2222222-2", "LTR-22222")
    assert body["fullName"] == "Jane Doe"


def test_cli_reports_errors_with_nonzero_exit(cli_env, capsys):
    code, body = _run(capsys, "verify", "bad", "LTR-12345")
    assert code == 1
    assert body["step"] == 1

    code, body = _run(capsys, "reject", "999")
    assert code == 1
    assert body == {"error": "Verification request not found"}


def test_cli_exits_nonzero_on_invalid_settings(cli_env, monkeypatch, capsys):
    monkeypatch.setenv("STORAGE_BACKEND", "postgres")

    assert cli.main(["lawyers"]) == 1
    assert capsys.readouterr().out == ""
