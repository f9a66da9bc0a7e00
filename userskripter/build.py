"""Write userscript artifacts produced by the serializers to disk."""

from __future__ import annotations

import logging
import os
import shutil
from typing import Dict, Optional

from userskripter.compiler.kotlin import compile_to_kotlin
from userskripter.compiler.settings import SOURCE_EXTENSION
from userskripter.config import Configuration
from userskripter.core import artifact_path
from userskripter.logging import log_build_event
from userskripter.metadata.header import serialize_metadata_block
from userskripter.project import PRODUCTION

USERSCRIPT_DIR = "userskripter"
EVENT_LOG_NAME = "events.jsonl"


class UserscriptBuild:
    """Generate the ``meta``/``user`` files and the constants source.

    Parameters
    ----------
    configuration:
        Resolved settings, metadata and transpiler options.
    log_path:
        Location of the JSONL build-event log. Defaults to
        ``{build_dir}/userskripter/events.jsonl``.
    """

    def __init__(self, configuration: Configuration, *, log_path: Optional[str] = None) -> None:
        self.configuration = configuration
        self.output_dir = os.path.join(configuration.build_dir, USERSCRIPT_DIR)
        self.log_path = log_path or os.path.join(self.output_dir, EVENT_LOG_NAME)
        self._logger = logging.getLogger("userskripter.build")

    @property
    def script_id(self) -> str:
        return self.configuration.settings.id

    @property
    def meta_file(self) -> str:
        return artifact_path(self.output_dir, f"{self.script_id}.meta.js")

    @property
    def user_file(self) -> str:
        return artifact_path(self.output_dir, f"{self.script_id}.user.js")

    @property
    def source_map_file(self) -> str:
        return artifact_path(self.output_dir, f"{self.script_id}.user.js.map")

    @property
    def constants_file(self) -> str:
        transpiler = self.configuration.transpiler
        return artifact_path(os.fspath(transpiler.output_directory), f"{transpiler.output_name}{SOURCE_EXTENSION}")

    def default_payload(self) -> str:
        """Return where the Kotlin/JS bundle for the configured mode lands."""

        settings = self.configuration.settings
        folder = "distributions" if settings.mode == PRODUCTION else "developmentExecutable"
        return os.path.join(self.configuration.build_dir, folder, f"{settings.project.name}.js")

    def render_header(self) -> str:
        return serialize_metadata_block(self.configuration.metadata)

    def render_constants(self) -> str:
        configuration = self.configuration
        return compile_to_kotlin(configuration.settings, configuration.metadata, configuration.transpiler)

    def write_meta_file(self) -> str:
        header = self.render_header()
        path = self.meta_file
        _write_text(path, header)
        self._record("meta_file_written", path)
        return path

    def write_user_file(self, payload_path: Optional[str] = None) -> str:
        """Write the header followed by the compiled script bytes."""

        header = self.render_header()
        payload_path = payload_path or self.default_payload()
        with open(payload_path, "rb") as handle:
            payload = handle.read()

        path = self.user_file
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as handle:
            handle.write(header.encode("utf-8"))
            handle.write(payload)
        self._record("user_file_written", path, payload=payload_path, mode=self.configuration.settings.mode)
        return path

    def copy_source_map(self, payload_path: Optional[str] = None) -> Optional[str]:
        source_map = f"{payload_path or self.default_payload()}.map"
        if not os.path.exists(source_map):
            self._logger.warning("Could not find a source-map at: %s", source_map)
            return None
        path = self.source_map_file
        os.makedirs(os.path.dirname(path), exist_ok=True)
        shutil.copyfile(source_map, path)
        self._record("source_map_copied", path, source=source_map)
        return path

    def write_constants_file(self) -> str:
        source = self.render_constants()
        path = self.constants_file
        _write_text(path, source)
        self._record(
            "constants_file_written",
            path,
            transpiler=self.configuration.transpiler.snapshot(),
        )
        return path

    def generate(self, payload_path: Optional[str] = None) -> Dict[str, str]:
        """Run every enabled step and return the written paths by artifact."""

        settings = self.configuration.settings
        outputs = {
            "meta": self.write_meta_file(),
            "user": self.write_user_file(payload_path),
        }
        if settings.include_source_map:
            source_map = self.copy_source_map(payload_path)
            if source_map:
                outputs["source_map"] = source_map
        if self.configuration.transpiler.run_on_generate:
            outputs["constants"] = self.write_constants_file()
        self._logger.info("Generated userscript %s (%s)", settings.id, ", ".join(sorted(outputs)))
        return outputs

    def _record(self, event: str, path: str, **fields) -> None:
        self._logger.info("%s: %s", event, path)
        record = {
            "event": event,
            "id": self.script_id,
            "path": path,
            "inputs": self.configuration.metadata.snapshot(),
        }
        record.update(fields)
        log_build_event(record, path=self.log_path)


def _write_text(path: str, text: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(text)


__all__ = ["EVENT_LOG_NAME", "USERSCRIPT_DIR", "UserscriptBuild"]
