"""Tests for the CLI entry point."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from clusterscore.cli.main import cli


@pytest.fixture
def project(tmp_path: Path, specs_dir: Path, make_kube_bench_report) -> Path:
    """Project with specs, a files store, and one node report."""
    resources = tmp_path / ".clusterscore" / "resources"
    resources.mkdir(parents=True)
    report = make_kube_bench_report("node-1", [("1.1.1", "PASS"), ("1.1.1", "FAIL")])
    (resources / "Node.yaml").write_text(yaml.safe_dump({"items": [report]}), encoding="utf-8")
    return tmp_path


class TestSpecsCommand:
    def test_lists_specs(self, project: Path):
        result = CliRunner().invoke(cli, ["-p", str(project), "specs"])
        assert result.exit_code == 0
        assert "cis-1.5" in result.output
        assert "nsa" in result.output

    def test_no_specs(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["-p", str(tmp_path), "specs"])
        assert result.exit_code == 0
        assert "No specs found" in result.output


class TestInitCommand:
    def test_creates_summary_record(self, project: Path):
        result = CliRunner().invoke(cli, ["-p", str(project), "init", "cis-1.5"])
        assert result.exit_code == 0
        path = project / ".clusterscore" / "clustercompliancereports" / "cis-1.5.yaml"
        assert path.exists()
        assert yaml.safe_load(path.read_text(encoding="utf-8"))["spec"]["name"] == "cis-1.5"

    def test_existing_record_left_alone(self, project: Path):
        runner = CliRunner()
        runner.invoke(cli, ["-p", str(project), "init", "cis-1.5"])
        result = runner.invoke(cli, ["-p", str(project), "init", "cis-1.5"])
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_unknown_spec(self, project: Path):
        result = CliRunner().invoke(cli, ["-p", str(project), "init", "pci"])
        assert result.exit_code == 1
        assert "Spec not found" in result.output


class TestGenerateCommand:
    def test_generates_reports(self, project: Path):
        runner = CliRunner()
        runner.invoke(cli, ["-p", str(project), "init", "cis-1.5"])
        result = runner.invoke(cli, ["-p", str(project), "generate", "cis-1.5"])
        assert result.exit_code == 0, result.output
        assert "Pass: 1" in result.output
        assert "Fail: 1" in result.output
        assert "C1" in result.output

        store = project / ".clusterscore"
        summary = yaml.safe_load((store / "clustercompliancereports" / "cis-1.5.yaml").read_text(encoding="utf-8"))
        assert summary["status"]["summary"] == {"passCount": 1, "failCount": 1}
        assert (store / "clustercompliancedetailreports" / "cis-1.5-details.yaml").exists()

    def test_spec_by_path(self, project: Path, specs_dir: Path):
        runner = CliRunner()
        runner.invoke(cli, ["-p", str(project), "init", str(specs_dir / "cis.yaml")])
        result = runner.invoke(cli, ["-p", str(project), "generate", str(specs_dir / "cis.yaml")])
        assert result.exit_code == 0, result.output

    def test_missing_summary_record_fails(self, project: Path):
        result = CliRunner().invoke(cli, ["-p", str(project), "generate", "cis-1.5"])
        assert result.exit_code == 1
        assert "missing" in result.output
        # The detail report is written before the summary check fails
        assert (project / ".clusterscore" / "clustercompliancedetailreports" / "cis-1.5-details.yaml").exists()

    def test_store_override(self, project: Path):
        result = CliRunner().invoke(cli, ["-p", str(project), "--store", "memory", "generate", "cis-1.5"])
        assert result.exit_code == 1
        assert "missing" in result.output

    def test_bad_config_file(self, project: Path):
        bad = project / "bad.yaml"
        bad.write_text("- not a mapping\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["-p", str(project), "--config", str(bad), "specs"])
        assert result.exit_code == 1
