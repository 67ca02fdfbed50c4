"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner
from factories import make_raw

from crossmodel.cli import cli


def _write_input(tmp_path, data=None):
    path = tmp_path / "results.json"
    if data is None:
        data = {
            "gpt-4": make_raw(
                confidence=0.9, sentiment=("positive", 0.9), recommendations=["Expand into Europe"]
            ),
            "claude-3": make_raw(
                confidence=0.7, sentiment=("negative", 0.85), recommendations=["Reduce headcount"]
            ),
        }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestCli:
    def setup_method(self):
        self.runner = CliRunner()

    def test_consolidate_json(self, tmp_path):
        result = self.runner.invoke(cli, ["consolidate", str(_write_input(tmp_path)), "--json"])

        assert result.exit_code == 0
        assert '"status": "ok"' in result.output
        assert '"confidenceScore"' in result.output

    def test_consolidate_tables(self, tmp_path):
        result = self.runner.invoke(
            cli, ["consolidate", str(_write_input(tmp_path)), "--suggest-resolutions"]
        )

        assert result.exit_code == 0
        assert "Consolidated Insights" in result.output
        assert "Conflicts" in result.output

    def test_consolidate_auth_failure(self, tmp_path):
        result = self.runner.invoke(
            cli, ["consolidate", str(_write_input(tmp_path)), "--json", "--auth-failed"]
        )

        assert result.exit_code == 0
        assert '"status": "auth_required"' in result.output

    def test_consolidate_rejects_non_object_input(self, tmp_path):
        result = self.runner.invoke(
            cli, ["consolidate", str(_write_input(tmp_path, ["gpt-4"]))]
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    @pytest.mark.parametrize(
        "option,value", [("--high-threshold", "5"), ("--spread", "1.5")]
    )
    def test_consolidate_rejects_out_of_range_calibration(self, tmp_path, option, value):
        result = self.runner.invoke(
            cli, ["consolidate", str(_write_input(tmp_path)), option, value]
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_consolidate_accepts_calibration_overrides(self, tmp_path):
        result = self.runner.invoke(
            cli,
            ["consolidate", str(_write_input(tmp_path)), "--json", "--high-threshold", "0.95"],
        )
        assert result.exit_code == 0
        assert '"severity": "low"' in result.output

    def test_consolidate_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = self.runner.invoke(cli, ["consolidate", str(path)])
        assert result.exit_code == 1

    def test_export_writes_report(self, tmp_path):
        output = tmp_path / "reports" / "report.json"
        result = self.runner.invoke(
            cli,
            [
                "export",
                str(_write_input(tmp_path)),
                "--output",
                str(output),
                "--content-id",
                "upload-7",
            ],
        )

        assert result.exit_code == 0
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["uploadId"] == "upload-7"
        assert sorted(report["summary"]["modelsUsed"]) == ["claude-3", "gpt-4"]
        assert report["analysisResults"]["consolidated"]["status"] == "ok"

    def test_exported_report_can_be_consolidated_again(self, tmp_path):
        output = tmp_path / "report.json"
        self.runner.invoke(cli, ["export", str(_write_input(tmp_path)), "-o", str(output)])

        result = self.runner.invoke(cli, ["consolidate", str(output), "--json"])
        assert result.exit_code == 0
        assert '"status": "ok"' in result.output

    def test_models(self):
        result = self.runner.invoke(cli, ["models"])

        assert result.exit_code == 0
        assert "gpt-4" in result.output
        assert "Gemini Pro" in result.output
