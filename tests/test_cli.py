"""Tests for the checksum-attest command line."""

import json

import pytest

from checksum_attest import hash_artifact
from checksum_attest import cli, verify


@pytest.fixture(autouse=True)
def fixed_host(monkeypatch):
    monkeypatch.setattr(verify.socket, "gethostname", lambda: "ci-runner")


@pytest.fixture
def key_file(tmp_path):
    path = tmp_path / "hmac.key"
    path.write_text("cli-secret\n", encoding="utf-8")
    return path


def _verify_args(artifact, sidecar, key_file, *extra):
    return [
        "verify",
        "--artifact", str(artifact),
        "--checksum", str(sidecar),
        "--key-type", "hmac-sha256",
        "--key-file", str(key_file),
        *extra,
    ]


def test_hash_prints_digest(artifact_dir, capsys):
    assert cli.main(["hash", str(artifact_dir)]) == cli.EXIT_SATISFIED
    assert capsys.readouterr().out.strip() == hash_artifact(artifact_dir)


def test_hash_output_has_no_trailing_newline(artifact_dir, tmp_path):
    sidecar = tmp_path / "artifact.sha256"
    cli.main(["hash", str(artifact_dir), "--output", str(sidecar)])
    assert sidecar.read_text(encoding="utf-8") == hash_artifact(artifact_dir)


def test_verify_round_trip_json(artifact_dir, tmp_path, key_file, capsys):
    sidecar = tmp_path / "artifact.sha256"
    cli.main(["hash", str(artifact_dir), "--output", str(sidecar)])
    capsys.readouterr()

    code = cli.main(_verify_args(artifact_dir, sidecar, key_file, "--json"))
    record = json.loads(capsys.readouterr().out)

    assert code == cli.EXIT_SATISFIED
    assert record["satisfied"] is True
    assert record["host_name"] == "ci-runner"
    assert record["kind"] == "CHECKSUM"
    assert record["signature"]


def test_verify_mismatch_exit_code(artifact_dir, tmp_path, key_file, capsys):
    sidecar = tmp_path / "artifact.sha256"
    cli.main(["hash", str(artifact_dir), "--output", str(sidecar)])
    (artifact_dir / "a.txt").write_bytes(b"tampered")

    code = cli.main(_verify_args(artifact_dir, sidecar, key_file))

    assert code == cli.EXIT_MISMATCH
    assert "NOT satisfied" in capsys.readouterr().out


def test_verify_unavailable_exit_code(artifact_dir, tmp_path, key_file):
    code = cli.main(_verify_args(artifact_dir, tmp_path / "missing.sha256", key_file))
    assert code == cli.EXIT_UNAVAILABLE


def test_missing_key_file_is_reported(artifact_dir, tmp_path, capsys):
    code = cli.main(_verify_args(artifact_dir, tmp_path / "x.sha256", tmp_path / "nokey"))
    assert code == cli.EXIT_UNAVAILABLE
    assert "error:" in capsys.readouterr().err
