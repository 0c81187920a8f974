# tests/test_pipeline_errors.py

import json
from pathlib import Path

import httpx
import pytest

import src.run_lookup as run_lookup
import src.instant_answer.pipeline as pipeline_mod


def test_cli_without_topics_or_input_returns_2():
    assert run_lookup.main([]) == 2


def test_cli_missing_input_file_exits_nonzero(tmp_path: Path):
    """
    If the input file does not exist, the CLI should fail with a non-zero
    exit code and not create any output.
    """
    missing_input = tmp_path / "does_not_exist.json"
    output_dir = tmp_path / "output"

    exit_code = run_lookup.main(
        ["--input", str(missing_input), "--output-dir", str(output_dir)]
    )

    assert exit_code != 0
    assert not output_dir.exists()


def test_cli_invalid_json_input_exits_nonzero(tmp_path: Path):
    input_path = tmp_path / "broken.json"
    input_path.write_text("{not json", encoding="utf-8")

    exit_code = run_lookup.main(
        ["--input", str(input_path), "--output-dir", str(tmp_path / "output")]
    )

    assert exit_code == 1


def test_cli_lookup_failure_exits_nonzero(tmp_path: Path, monkeypatch):
    """
    A transport failure from the API must surface as a failed run, and no
    answers file may be written.
    """
    def failing_query(topic, http_client=None):
        request = httpx.Request("GET", "https://duckduckgo.com")
        raise httpx.ConnectError("Simulated network failure", request=request)

    monkeypatch.setattr(pipeline_mod, "query", failing_query)
    output_dir = tmp_path / "output"

    exit_code = run_lookup.main(["Elixir", "--output-dir", str(output_dir)])

    assert exit_code == 1
    assert not output_dir.exists()


def test_run_pipeline_propagates_lookup_errors(tmp_path: Path):
    def failing_fetch(topic):
        raise json.JSONDecodeError("Expecting value", "<html>", 0)

    with pytest.raises(json.JSONDecodeError):
        pipeline_mod.run_pipeline(
            topics=["Elixir"], output_dir=tmp_path, fetch=failing_fetch
        )


def test_cli_output_path_is_a_file_returns_error(tmp_path: Path):
    """
    If the output directory cannot be created, the CLI should exit non-zero.
    """
    input_path = tmp_path / "input.json"
    input_path.write_text(json.dumps([{"Type": "E"}]), encoding="utf-8")

    output_dir = tmp_path / "not_a_dir"
    output_dir.write_text("occupied", encoding="utf-8")

    exit_code = run_lookup.main(
        ["--input", str(input_path), "--output-dir", str(output_dir)]
    )

    assert exit_code != 0, "CLI should fail when the output path is unusable."
    assert output_dir.read_text(encoding="utf-8") == "occupied"


def test_cli_scalar_json_input_exits_nonzero(tmp_path: Path):
    input_path = tmp_path / "scalar.json"
    input_path.write_text('"Elixir"', encoding="utf-8")
    output_dir = tmp_path / "output"

    exit_code = run_lookup.main(
        ["--input", str(input_path), "--output-dir", str(output_dir)]
    )

    assert exit_code == 1
    assert not output_dir.exists()
