"""Shared pytest fixtures for the userskripter suite."""

from __future__ import annotations

import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from userskripter.compiler.settings import TranspilerSettings
from userskripter.metadata.block import UserscriptMetadata
from userskripter.project import ProjectInfo, UserskripterSettings


_ENVIRONMENT_OVERRIDES = (
    "USERSKRIPTER_MODE",
    "USERSKRIPTER_BUILD_LOG",
    "USERSKRIPTER_CONFIG",
    "USERSKRIPTER_BUILD_DIR",
    "USERSKRIPTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clear_userskripter_environment(monkeypatch) -> None:
    for name in _ENVIRONMENT_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def project() -> ProjectInfo:
    return ProjectInfo(name="example-script", group="com.example", description="Example userscript", version="1.2.0")


@pytest.fixture()
def settings(project: ProjectInfo) -> UserskripterSettings:
    return UserskripterSettings(project=project)


@pytest.fixture()
def metadata(settings: UserskripterSettings) -> UserscriptMetadata:
    return UserscriptMetadata(settings)


@pytest.fixture()
def bare_metadata() -> UserscriptMetadata:
    """Metadata whose project contributes no defaults besides ``name``."""

    return UserscriptMetadata(UserskripterSettings(project=ProjectInfo(name="Foo")))


@pytest.fixture()
def transpiler(project: ProjectInfo, tmp_path) -> TranspilerSettings:
    return TranspilerSettings(project, str(tmp_path / "generated"))
