"""Tests for the saucecart CLI."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from saucecart.cli import main

SAMPLE_SCENARIO = Path(__file__).parent.parent / "scenarios" / "checkout_flow.yaml"


class TestCli:
    """Tests for the click commands."""

    def test_products(self):
        result = CliRunner().invoke(main, ["products"])

        assert result.exit_code == 0
        assert "Sauce Labs Backpack" in result.output
        assert "9.99" in result.output

    def test_demo(self):
        result = CliRunner().invoke(main, ["demo"])

        assert result.exit_code == 0
        assert "checkout" in result.output
        assert "order details" in result.output

    def test_demo_locked_out(self):
        result = CliRunner().invoke(main, ["demo", "--username", "locked_out_user"])

        assert result.exit_code == 1
        assert "403" in result.output

    def test_run_scenario_table(self):
        result = CliRunner().invoke(main, ["run", str(SAMPLE_SCENARIO)])

        assert result.exit_code == 0
        assert "steps passed" in result.output

    def test_run_scenario_json(self):
        result = CliRunner().invoke(main, ["run", str(SAMPLE_SCENARIO), "--format", "json"])

        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["passed"] is True
        assert report["steps"][0]["actual_status"] == 401

    def test_run_failing_scenario(self, tmp_path):
        scenario_file = tmp_path / "fail.yaml"
        scenario_file.write_text("steps:\n  - method: GET\n    path: /products\n    expect: {status: 200}\n")

        result = CliRunner().invoke(main, ["run", str(scenario_file)])

        assert result.exit_code == 1
        assert "steps failed" in result.output

    def test_run_malformed_scenario(self, tmp_path):
        scenario_file = tmp_path / "bad.yaml"
        scenario_file.write_text("just text\n")

        result = CliRunner().invoke(main, ["run", str(scenario_file)])

        assert result.exit_code == 2

    def test_config_option(self, tmp_path):
        config_file = tmp_path / "saucecart.yaml"
        config_file.write_text("auth:\n  valid_username: alice\n  valid_password: pw\n")

        result = CliRunner().invoke(main, ["--config", str(config_file), "demo"])

        assert result.exit_code == 0
        assert "alice" in result.output

    def test_invalid_config(self, tmp_path):
        config_file = tmp_path / "saucecart.yaml"
        config_file.write_text("auth: [broken\n")

        result = CliRunner().invoke(main, ["--config", str(config_file), "products"])

        assert result.exit_code == 2

    def test_run_with_markup_in_step_names(self, tmp_path):
        """Scenario text is printed literally, not as rich markup."""
        scenario_file = tmp_path / "markup.yaml"
        scenario_file.write_text(
            "steps:\n"
            "  - name: '[/]'\n"
            "    method: GET\n"
            "    path: /products\n"
            "    expect: {status: 401}\n"
            "  - name: '[red]x'\n"
            "    method: GET\n"
            "    path: '/[bold]cart'\n"
            "    expect: {status: 404}\n"
        )

        result = CliRunner().invoke(main, ["run", str(scenario_file)])

        assert result.exit_code == 0, result.output
        assert "[/]" in result.output
        assert "[red]x" in result.output

    @patch("saucecart.tracing.Langfuse")
    def test_run_traces_store_calls(self, langfuse_cls, tmp_path):
        client = MagicMock()
        langfuse_cls.return_value = client
        config_file = tmp_path / "saucecart.yaml"
        config_file.write_text("tracing:\n  enabled: true\n  public_key: pk\n  secret_key: sk\n")

        result = CliRunner().invoke(main, ["-c", str(config_file), "run", str(SAMPLE_SCENARIO)])

        assert result.exit_code == 0, result.output
        assert client.trace.call_count == 7
        assert client.span.called
        client.flush.assert_called()
