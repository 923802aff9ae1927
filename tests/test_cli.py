"""Tests for the click command-line interface."""

from __future__ import annotations

import csv
import io
import json
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from crindex.cli import cli
from crindex.codec import decode_snapshot, encode_snapshot, extract_fragment
from crindex.models.assessment import AssessmentSnapshot, SnapshotItem
from crindex.models.catalog import DEFAULT_CATALOG

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result


@pytest.fixture()
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SHARE_BASE_URL", "https://example.test/cer/")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    return tmp_path / "data"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _invoke(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(cli, list(args), catch_exceptions=False)


def _state(runner: CliRunner) -> dict:
    result = _invoke(runner, "show", "--json")
    assert result.exit_code == 0
    return json.loads(result.stdout)


@pytest.mark.usefixtures("data_dir")
class TestShow:
    def test_defaults(self, runner: CliRunner):
        result = _invoke(runner, "show")
        assert result.exit_code == 0
        assert "[capacity]" in result.stdout
        assert "autonomy" in result.stdout
        assert "C→R Index:    51.5" in result.stdout
        assert "Tier 3 (developing)" in result.stdout

    def test_json(self, runner: CliRunner):
        state = _state(runner)
        assert state["scores"]["composite"] == 51.5
        assert state["scores"]["recovery_reduction"] == 21
        assert state["scores"]["pivot_tier"] == "developing"
        assert state["snapshot"]["v"] == 1
        assert len(state["snapshot"]["items"]) == len(DEFAULT_CATALOG)

    def test_catalog(self, runner: CliRunner):
        result = _invoke(runner, "catalog")
        assert result.exit_code == 0
        for metric_id in DEFAULT_CATALOG.ids:
            assert metric_id in result.stdout


@pytest.mark.usefixtures("data_dir")
class TestEdits:
    def test_set_is_clamped_and_persisted(self, runner: CliRunner):
        result = _invoke(runner, "set", "autonomy", "150")
        assert result.exit_code == 0
        assert "Autonomy: 100" in result.stdout

        items = {i["id"]: i["value"] for i in _state(runner)["snapshot"]["items"]}
        assert items["autonomy"] == 100

    def test_set_negative(self, runner: CliRunner):
        result = _invoke(runner, "set", "pivot_ability", "-5")
        assert result.exit_code == 0
        assert "Pivot Ability: 0" in result.stdout
        items = {i["id"]: i["value"] for i in _state(runner)["snapshot"]["items"]}
        assert items["pivot_ability"] == 0

    def test_set_negative_after_separator(self, runner: CliRunner):
        result = _invoke(runner, "set", "--", "pivot_ability", "-5")
        assert result.exit_code == 0
        items = {i["id"]: i["value"] for i in _state(runner)["snapshot"]["items"]}
        assert items["pivot_ability"] == 0

    def test_set_unknown_metric(self, runner: CliRunner):
        result = runner.invoke(cli, ["set", "charisma", "50"])
        assert result.exit_code == 1
        assert "Unknown metric id" in result.stderr

    def test_zero_weights(self, runner: CliRunner):
        _invoke(runner, "weight", "capacity", "0")
        result = _invoke(runner, "weight", "adaptability", "0")
        assert "C→R Index: 0.0" in result.stdout

    def test_negative_weight_stored_as_entered(self, runner: CliRunner):
        result = _invoke(runner, "weight", "adaptability", "-0.5")
        assert result.exit_code == 0
        weights = _state(runner)["snapshot"]["weights"]
        assert weights["adaptabilityWeight"] == -0.5

    def test_non_finite_weight_rejected(self, runner: CliRunner):
        result = _invoke(runner, "weight", "capacity", "nan")
        assert result.exit_code == 1
        assert "finite number" in result.stderr
        weights = _state(runner)["snapshot"]["weights"]
        assert weights["capacityWeight"] == 0.5

    def test_weight_stored_unclamped(self, runner: CliRunner):
        _invoke(runner, "weight", "capacity", "1.5")
        weights = _state(runner)["snapshot"]["weights"]
        assert weights["capacityWeight"] == 1.5

    def test_context(self, runner: CliRunner):
        result = _invoke(runner, "context", "--team-name", "Payments", "--date", "2026-05-01")
        assert "teamName: Payments" in result.stdout
        context = _state(runner)["snapshot"]["context"]
        assert context["teamName"] == "Payments"
        assert context["assessmentDate"] == "2026-05-01"

    def test_reset(self, runner: CliRunner):
        _invoke(runner, "set", "autonomy", "1")
        _invoke(runner, "context", "--team-name", "Payments")
        result = _invoke(runner, "reset", "--yes")
        assert "51.5" in result.stdout
        state = _state(runner)
        assert state["snapshot"]["context"] is None
        assert state["scores"]["composite"] == 51.5


@pytest.mark.usefixtures("data_dir")
class TestSharing:
    def test_share_link(self, runner: CliRunner):
        _invoke(runner, "set", "xfn_swarm", "88")
        link = _invoke(runner, "share").stdout.strip()
        assert link.startswith("https://example.test/cer/#")
        snapshot = decode_snapshot(extract_fragment(link) or "")
        assert snapshot is not None
        assert snapshot.values_by_id()["xfn_swarm"] == 88

    def test_share_token_only(self, runner: CliRunner):
        token = _invoke(runner, "share", "--token").stdout.strip()
        assert "#" not in token
        assert decode_snapshot(token) is not None

    def test_import_replaces_state(self, runner: CliRunner):
        _invoke(runner, "set", "autonomy", "5")
        token = encode_snapshot(AssessmentSnapshot(items=[SnapshotItem(id="autonomy", value=90)]))
        result = _invoke(runner, "import", f"https://example.test/cer/#{token}")
        assert result.exit_code == 0
        assert "Imported 1 metric value(s)." in result.stdout
        items = {i["id"]: i["value"] for i in _state(runner)["snapshot"]["items"]}
        assert items["autonomy"] == 90
        assert items["psych_safety"] == 55

    def test_import_malformed_link(self, runner: CliRunner):
        _invoke(runner, "set", "autonomy", "5")
        result = runner.invoke(cli, ["import", "https://example.test/cer/#garbage!!"])
        assert result.exit_code == 1
        assert "cannot import link" in result.stderr
        items = {i["id"]: i["value"] for i in _state(runner)["snapshot"]["items"]}
        assert items["autonomy"] == 5

    def test_link_option_used_when_nothing_saved(self, runner: CliRunner):
        token = encode_snapshot(AssessmentSnapshot(items=[SnapshotItem(id="autonomy", value=77)]))
        result = _invoke(runner, "--link", f"https://example.test/cer/#{token}", "show", "--json")
        items = {i["id"]: i["value"] for i in json.loads(result.stdout)["snapshot"]["items"]}
        assert items["autonomy"] == 77

    def test_link_option_ignored_when_state_saved(self, runner: CliRunner):
        _invoke(runner, "set", "autonomy", "5")
        token = encode_snapshot(AssessmentSnapshot(items=[SnapshotItem(id="autonomy", value=77)]))
        result = _invoke(runner, "--link", token, "show", "--json")
        items = {i["id"]: i["value"] for i in json.loads(result.stdout)["snapshot"]["items"]}
        assert items["autonomy"] == 5

    def test_malformed_link_option_falls_back(self, runner: CliRunner):
        result = _invoke(runner, "--link", "https://example.test/cer/#%%%", "show", "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["scores"]["composite"] == 51.5


@pytest.mark.usefixtures("data_dir")
class TestExportAndChart:
    def test_export_to_file(self, runner: CliRunner, tmp_path: Path):
        target = tmp_path / "out.csv"
        result = _invoke(runner, "export", "--output", str(target))
        assert result.exit_code == 0
        rows = list(csv.DictReader(io.StringIO(target.read_text(encoding="utf-8"))))
        assert len(rows) == len(DEFAULT_CATALOG)
        assert rows[0]["CER"] == "51.5"

    def test_export_default_location(self, runner: CliRunner, data_dir: Path):
        _invoke(runner, "export")
        assert (data_dir / "creativity_resilience_export.csv").exists()

    def test_export_to_stdout(self, runner: CliRunner):
        result = _invoke(runner, "export", "-o", "-")
        assert result.stdout.startswith("group,id,label,value,")

    def test_chart(self, runner: CliRunner):
        result = _invoke(runner, "chart")
        series = json.loads(result.stdout)
        assert len(series["radar"]) == len(DEFAULT_CATALOG)
        assert [b["score"] for b in series["bars"]] == [55, 48, 52]
