"""Artifact writer tests."""

from __future__ import annotations

import json
import logging
import os

import pytest

from userskripter.build import UserscriptBuild
from userskripter.config import build_configuration
from userskripter.core import PathTraversalError


def _configuration(tmp_path, **overrides):
    payload = {
        "project": {"name": "demo", "group": "org.demo", "version": "1.0.0"},
        "metadata": {"match": ["*://demo.org/*"]},
    }
    payload.update(overrides)
    return build_configuration(payload, build_dir=str(tmp_path / "build"))


def _payload(tmp_path) -> str:
    path = tmp_path / "demo.js"
    path.write_text("console.log('demo');\n", encoding="utf-8")
    return str(path)


def test_generate_writes_enabled_artifacts(tmp_path) -> None:
    build = UserscriptBuild(_configuration(tmp_path))

    outputs = build.generate(_payload(tmp_path))

    assert set(outputs) == {"meta", "user", "constants"}
    header = build.render_header()
    with open(outputs["meta"], "r", encoding="utf-8") as handle:
        assert handle.read() == header
    with open(outputs["user"], "r", encoding="utf-8") as handle:
        assert handle.read() == header + "console.log('demo');\n"
    assert outputs["meta"].endswith(os.path.join("userskripter", "demo.meta.js"))
    assert outputs["constants"].endswith(os.path.join("generated", "userskripter", "kotlin", "UserscriptMetadata.kt"))
    with open(outputs["constants"], "r", encoding="utf-8") as handle:
        assert handle.read().startswith("package org.demo\n")


def test_generate_logs_build_events(tmp_path) -> None:
    log_path = tmp_path / "events.jsonl"
    build = UserscriptBuild(_configuration(tmp_path), log_path=str(log_path))

    build.generate(_payload(tmp_path))

    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [record["event"] for record in records] == [
        "meta_file_written",
        "user_file_written",
        "constants_file_written",
    ]
    assert records[0]["inputs"]["name"] == "demo"
    assert records[1]["mode"] == "production"
    assert records[2]["transpiler"]["outputName"] == "UserscriptMetadata"
    assert all("timestamp" in record for record in records)


def test_run_on_generate_can_be_disabled(tmp_path) -> None:
    build = UserscriptBuild(_configuration(tmp_path, transpiler={"runOnGenerate": False}))

    outputs = build.generate(_payload(tmp_path))

    assert "constants" not in outputs


def test_missing_source_map_is_a_warning(tmp_path, caplog) -> None:
    build = UserscriptBuild(_configuration(tmp_path, includeSourceMap=True))

    with caplog.at_level(logging.WARNING, logger="userskripter.build"):
        outputs = build.generate(_payload(tmp_path))

    assert "source_map" not in outputs
    assert "Could not find a source-map" in caplog.text


def test_source_map_is_copied(tmp_path) -> None:
    payload = _payload(tmp_path)
    with open(f"{payload}.map", "w", encoding="utf-8") as handle:
        handle.write("{}")
    build = UserscriptBuild(_configuration(tmp_path, includeSourceMap=True))

    outputs = build.generate(payload)

    assert outputs["source_map"].endswith("demo.user.js.map")
    assert os.path.exists(outputs["source_map"])


def test_default_payload_follows_mode(tmp_path) -> None:
    production = UserscriptBuild(_configuration(tmp_path))
    development = UserscriptBuild(_configuration(tmp_path, mode="development"))

    assert production.default_payload() == os.path.join(str(tmp_path / "build"), "distributions", "demo.js")
    assert development.default_payload() == os.path.join(
        str(tmp_path / "build"), "developmentExecutable", "demo.js"
    )


def test_script_id_cannot_escape_output_directory(tmp_path) -> None:
    build = UserscriptBuild(_configuration(tmp_path, id="../escape"))

    with pytest.raises(PathTraversalError):
        build.write_meta_file()


def test_missing_name_writes_nothing(tmp_path) -> None:
    configuration = _configuration(tmp_path)
    configuration.metadata.name = None
    build = UserscriptBuild(configuration)

    with pytest.raises(ValueError):
        build.write_meta_file()
    assert not os.path.exists(build.meta_file)
