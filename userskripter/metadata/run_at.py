"""Values accepted by the ``@run-at`` metadata key."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RunAt:
    """Injection point of a userscript, rendered by its ``name``."""

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("run-at value must be a non-empty string")

    def __str__(self) -> str:
        return self.name

    @classmethod
    def of(cls, value: "RunAt | str") -> "RunAt":
        """Return the known instance for *value*, or a custom one."""

        if isinstance(value, RunAt):
            return value
        return KNOWN_RUN_AT.get(value) or cls(value)


# Before any document loading, thus before any scripts run or images load.
DOCUMENT_START = RunAt("document-start")
# After the main page is loaded, before images and style sheets have loaded.
DOCUMENT_END = RunAt("document-end")
# After the page and all resources are loaded and page scripts have run.
DOCUMENT_IDLE = RunAt("document-idle")
# TamperMonkey only.
DOCUMENT_BODY = RunAt("document-body")
CONTEXT_MENU = RunAt("context-menu")

KNOWN_RUN_AT = {
    run_at.name: run_at
    for run_at in (DOCUMENT_START, DOCUMENT_END, DOCUMENT_IDLE, DOCUMENT_BODY, CONTEXT_MENU)
}


__all__ = [
    "CONTEXT_MENU",
    "DOCUMENT_BODY",
    "DOCUMENT_END",
    "DOCUMENT_IDLE",
    "DOCUMENT_START",
    "KNOWN_RUN_AT",
    "RunAt",
]
