import json

import pytest
from typer.testing import CliRunner

from scriptflow import ScriptDispatcher
from scriptflow.cli import app
from scriptflow.errors import GraphError


@pytest.fixture
def payload_file(tmp_path, make_payload):
    path = tmp_path / "payload.json"
    path.write_text(make_payload(("a", "b")).model_dump_json())
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("SCRIPTFLOW_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("SCRIPTFLOW_LOG_LEVEL", "ERROR")
    monkeypatch.delenv("SCRIPTFLOW_MODEL", raising=False)


def test_graph_command_lists_steps(payload_file):
    runner = CliRunner()
    result = runner.invoke(app, ["graph", "headline", str(payload_file)])
    assert (
        result.exit_code == 0
    ), f"Command failed with exit code {result.exit_code}. Output: {result.output}"
    output = result.output
    assert "HeadlineTopicProgramScriptGenerationWorkflow (2 fan-out steps)" in output
    assert "summarize_0\t<- -" in output
    assert "generate_script\t<- summarize_0, summarize_1" in output


def test_generate_command_prints_script(payload_file):
    runner = CliRunner()
    result = runner.invoke(
        app, ["generate", "personalized", str(payload_file), "--model", "test"]
    )
    assert (
        result.exit_code == 0
    ), f"Command failed with exit code {result.exit_code}. Output: {result.output}"
    script = json.loads(result.output[result.output.index("{\n") :])
    assert set(script) == {"title", "opening", "posts", "ending"}


def test_generate_command_reads_config_file(tmp_path, payload_file):
    config_path = tmp_path / "scriptflow.yaml"
    config_path.write_text(
        """
generation:
  summarize_model: test
  script_model: test
log_level: ERROR
"""
    )
    runner = CliRunner()
    result = runner.invoke(
        app, ["generate", "headline", str(payload_file), "--config", str(config_path)]
    )
    assert (
        result.exit_code == 0
    ), f"Command failed with exit code {result.exit_code}. Output: {result.output}"
    assert '"opening"' in result.output


def test_unknown_kind_exits_with_error(payload_file):
    runner = CliRunner()
    result = runner.invoke(app, ["graph", "weekly", str(payload_file)])
    assert result.exit_code == 1
    assert "Unsupported workflow kind" in result.output


def test_invalid_payload_exits_with_error(tmp_path):
    path = tmp_path / "payload.json"
    path.write_text('{"items": "not a list"}')

    runner = CliRunner()
    result = runner.invoke(app, ["generate", "headline", str(path), "--model", "test"])
    assert result.exit_code == 1
    assert "Invalid payload" in result.output


def test_missing_payload_file_exits_with_error(tmp_path):
    runner = CliRunner()
    result = runner.invoke(app, ["graph", "headline", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "Payload file not found" in result.output


def test_engine_error_exits_with_error(payload_file, monkeypatch):
    async def stalled(self, kind, payload, cancel_token=None):
        raise GraphError("Run stalled: no runnable steps left")

    monkeypatch.setattr(ScriptDispatcher, "generate_script", stalled)

    runner = CliRunner()
    result = runner.invoke(
        app, ["generate", "headline", str(payload_file), "--model", "test"]
    )
    assert result.exit_code == 1
    assert "Script generation failed: Run stalled" in result.output


def test_model_option_overrides_environment(payload_file, monkeypatch):
    monkeypatch.setenv("SCRIPTFLOW_MODEL", "openai:gpt-4o")
    models = []
    original = ScriptDispatcher.__init__

    def recording_init(self, *args, **kwargs):
        original(self, *args, **kwargs)
        models.extend([self.summarizer.model, self.writer.model])

    monkeypatch.setattr(ScriptDispatcher, "__init__", recording_init)

    runner = CliRunner()
    result = runner.invoke(
        app, ["generate", "headline", str(payload_file), "--model", "test"]
    )
    assert (
        result.exit_code == 0
    ), f"Command failed with exit code {result.exit_code}. Output: {result.output}"
    assert models == ["test", "test"]
