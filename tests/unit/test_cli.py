"""
CLI Tests

Tests for allotree_cli: generate, verify and config subcommands,
configuration precedence and exit codes.
"""

import json
from pathlib import Path

import pytest

from allotree_cli.config import CLIConfig, load_config
from allotree_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)
from distribution.artifacts.io import save_claims_file

from fixtures.common import ACCOUNTS, make_referral_rows, make_rows, replace_entry


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each CLI test in an empty directory with an empty home."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_rows(path: Path, rows) -> Path:
    path.write_text(json.dumps(rows))
    return path


class TestParser:
    """Tests for create_parser()."""

    def test_generate_args(self):
        args = create_parser().parse_args(["generate", "--input", "a.json", "--out", "b.json"])
        assert args.command == "generate"
        assert args.variant is None
        assert args.json is False

    def test_verify_requires_input(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["verify"])

    def test_no_command(self, workdir):
        assert main([]) == EXIT_RUNTIME_ERROR


class TestGenerateCommand:
    """Tests for `allotree generate`."""

    def test_success(self, workdir, capsys):
        rows = write_rows(workdir / "rows.json", make_rows(3))
        code = main(["generate", "--input", str(rows), "--out", "claims.json"])

        assert code == EXIT_SUCCESS
        data = json.loads((workdir / "claims.json").read_text())
        assert len(data["claims"]) == 3
        assert data["merkleRoot"] in capsys.readouterr().out

    def test_json_summary(self, workdir, capsys):
        rows = write_rows(workdir / "rows.json", make_referral_rows())
        code = main([
            "generate", "--input", str(rows), "--out", "claims.json",
            "--variant", "referral", "--json",
        ])

        assert code == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["variant"] == "referral"
        assert summary["entries"] == 4

    def test_invalid_row(self, workdir, capsys):
        rows = make_rows(3)
        rows[2]["claimCap"] = "-4"
        path = write_rows(workdir / "rows.json", rows)

        code = main(["generate", "--input", str(path), "--out", "claims.json"])

        assert code == EXIT_RUNTIME_ERROR
        assert "row 2" in capsys.readouterr().err
        assert not (workdir / "claims.json").exists()

    def test_empty_input(self, workdir, capsys):
        path = write_rows(workdir / "rows.json", [])
        assert main(["generate", "--input", str(path), "--out", "claims.json"]) == EXIT_RUNTIME_ERROR

    def test_missing_input(self, workdir, capsys):
        code = main(["generate", "--input", "missing.json", "--out", "claims.json"])
        assert code == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err


class TestVerifyCommand:
    """Tests for `allotree verify`."""

    def test_valid_file(self, workdir, claims_file, capsys):
        path = save_claims_file(claims_file, workdir / "claims.json")
        assert main(["verify", "--input", str(path)]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "root_ok: true" in out
        assert "OK" in out

    def test_generated_referral_file(self, workdir, capsys):
        rows = write_rows(workdir / "rows.json", make_referral_rows())
        main(["generate", "--input", str(rows), "--out", "claims.json", "--variant", "referral"])
        assert main(["verify", "--input", "claims.json"]) == EXIT_SUCCESS

    def test_altered_claim_cap(self, workdir, claims_file, capsys):
        key = sorted(claims_file.claims)[0]
        path = save_claims_file(replace_entry(claims_file, key, claimCap="1"), workdir / "claims.json")

        assert main(["verify", "--input", str(path)]) == EXIT_VERIFICATION_FAILED
        out = capsys.readouterr().out
        assert "root_ok: false" in out
        assert "FAILED" in out

    def test_corrupted_proof(self, workdir, claims_file, capsys):
        key = sorted(claims_file.claims)[0]
        entry = claims_file.claims[key]
        path = save_claims_file(replace_entry(claims_file, key, proof=entry.proof[1:]), workdir / "claims.json")

        assert main(["verify", "--input", str(path), "--json"]) == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["rootMatches"] is True
        assert report["failed"] == 1

    def test_json_debug_lists_checks(self, workdir, claims_file, capsys):
        path = save_claims_file(claims_file, workdir / "claims.json")
        assert main(["verify", "--input", str(path), "--json", "--debug"]) == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        check_ids = {c["check_id"] for c in report["checks"]}
        assert {"index_set", "root_match"} <= check_ids
        assert f"claim:{ACCOUNTS[0]}" in check_ids

    def test_missing_file(self, workdir, capsys):
        assert main(["verify", "--input", "missing.json"]) == EXIT_RUNTIME_ERROR

    def test_malformed_json(self, workdir, capsys):
        (workdir / "claims.json").write_text("{")
        assert main(["verify", "--input", "claims.json"]) == EXIT_RUNTIME_ERROR

    def test_unreadable_file(self, workdir, capsys):
        (workdir / "claims.json").write_bytes(b"\xff\xfe{}")
        assert main(["verify", "--input", "claims.json"]) == EXIT_RUNTIME_ERROR
        assert "Error loading claims file" in capsys.readouterr().err

    def test_schema_violation(self, workdir, capsys):
        (workdir / "claims.json").write_text(json.dumps({"merkleRoot": "0x00", "claims": {}}))
        assert main(["verify", "--input", "claims.json"]) == EXIT_RUNTIME_ERROR
        assert "malformed" in capsys.readouterr().err

    def test_forced_variant_mismatch(self, workdir, referral_claims_file, capsys):
        path = save_claims_file(referral_claims_file, workdir / "claims.json")
        assert main(["verify", "--input", str(path), "--variant", "plain"]) == EXIT_RUNTIME_ERROR

    def test_wrong_leaf_order(self, workdir, capsys):
        rows = write_rows(workdir / "rows.json", make_rows(2))
        main(["generate", "--input", str(rows), "--out", "claims.json", "--leaf-order", "hash"])
        assert main(["verify", "--input", "claims.json", "--leaf-order", "hash"]) == EXIT_SUCCESS


class TestConfig:
    """Configuration loading and the config subcommand."""

    def test_defaults(self, workdir):
        config = load_config()
        assert config == CLIConfig()

    def test_file_then_env(self, workdir, monkeypatch):
        (workdir / "allotree.json").write_text(json.dumps({"leaf_order": "hash", "json_indent": 4}))
        monkeypatch.setenv("ALLOTREE_JSON_INDENT", "none")

        config = load_config()
        assert config.leaf_order == "hash"
        assert config.json_indent is None

    def test_explicit_missing_file(self, workdir):
        with pytest.raises(FileNotFoundError):
            load_config(workdir / "nope.json")

    def test_invalid_value(self, workdir, monkeypatch, capsys):
        monkeypatch.setenv("ALLOTREE_VARIANT", "fancy")
        with pytest.raises(ValueError, match="default_variant"):
            load_config()
        assert main(["config", "--show"]) == EXIT_RUNTIME_ERROR

    def test_config_variant_used_by_generate(self, workdir, capsys):
        (workdir / "allotree.json").write_text(json.dumps({"default_variant": "referral"}))
        rows = write_rows(workdir / "rows.json", make_referral_rows())

        assert main(["generate", "--input", str(rows), "--out", "claims.json"]) == EXIT_SUCCESS
        data = json.loads((workdir / "claims.json").read_text())
        assert all("referral" in entry for entry in data["claims"].values())

    def test_compact_output_from_env(self, workdir, monkeypatch):
        monkeypatch.setenv("ALLOTREE_JSON_INDENT", "none")
        rows = write_rows(workdir / "rows.json", make_rows(2))
        main(["generate", "--input", str(rows), "--out", "claims.json"])
        assert (workdir / "claims.json").read_text().count("\n") == 1

    def test_init_and_show(self, workdir, capsys, monkeypatch):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (workdir / "allotree.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

        monkeypatch.setenv("ALLOTREE_LEAF_ORDER", "hash")
        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["leaf_order"] == "hash"
        assert shown["default_variant"] == "auto"
