"""Userscript metadata block configuration."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from userskripter.metadata.property import PropertyHost, flag, many, named, single
from userskripter.project import UNSPECIFIED_VERSION, UserskripterSettings

Comparator = Callable[[str, str], int]


def _project_namespace(metadata: "UserscriptMetadata") -> Optional[str]:
    return metadata.project.group.strip() or None


def _project_version(metadata: "UserscriptMetadata") -> Optional[str]:
    version = (metadata.project.version or "").strip()
    if not version or version == UNSPECIFIED_VERSION:
        return None
    return version


class UserscriptMetadata(PropertyHost):
    """Properties written to the ``==UserScript==`` block.

    Attribute names are Python identifiers; the store keys are the header
    keys exactly as they appear in the block (``run-at``, ``updateURL``...).
    """

    name = single("name", lambda self: self.project.name)
    namespace = single("namespace", _project_namespace)
    description = single("description", lambda self: self.project.description)
    version = single("version", _project_version)

    match = many("match")
    require = many("require")
    resource = named("resource")
    grant = many("grant")
    run_at = single("run-at")
    icon = single("icon")

    # The script only runs in the top-level document, never in nested frames.
    no_frames = flag("noframes")

    # TamperMonkey specific keys from here on.
    icon64 = single("icon64")
    copyright = single("copyright")
    website = single("website")
    author = single("author")
    update_url = single("updateURL")
    download_url = single("downloadURL")
    support_url = single("supportURL")

    # Inject without any wrapper or sandbox.
    unwrap = flag("unwrap")

    antifeature = many("antifeature")

    # Domains (no top-level domains) that GM.xmlHttpRequest may retrieve,
    # including their subdomains.
    connect = many("connect")

    def __init__(self, settings: UserskripterSettings) -> None:
        self.settings = settings
        self.extra_properties: Dict[str, List[str]] = {}
        self.property_sorter: Optional[Comparator] = None
        super().__init__()

    @property
    def project(self):
        return self.settings.project

    def _extend(self, key: str, values: Iterable[str]) -> None:
        current = self.store.get(key) or []
        self.store.set(key, list(current) + [str(value) for value in values])

    def add_match(self, *patterns: str) -> None:
        self._extend("match", patterns)

    def match_host_name(self, host_name: str) -> None:
        """Add ``match`` entries covering *host_name* and its ``www.`` variant.

        *host_name* is a bare host such as ``website.com``, not a full url.
        """

        self.add_match(f"*://{host_name}/*", f"*://www.{host_name}/*")

    def add_require(self, *urls: str) -> None:
        self._extend("require", urls)

    def add_grant(self, *names: str) -> None:
        self._extend("grant", names)

    def add_resource(self, *resources: Tuple[str, str], **named_resources: str) -> None:
        current = dict(self.store.get("resource") or {})
        for resource_name, url in resources:
            current[resource_name] = url
        current.update(named_resources)
        self.store.set("resource", current)

    def add_connect(self, *values: str) -> None:
        """Add domains, subdomains, ``self``, ``localhost``, IPs or ``*``."""

        self._extend("connect", values)

    def connect_self(self) -> None:
        self.add_connect("self")

    def connect_localhost(self) -> None:
        self.add_connect("localhost")

    def connect_wildcard(self) -> None:
        """Allow any url; the engine asks the user on every request."""

        self.add_connect("*")

    def antifeature_ads(self, description: str) -> None:
        self._extend("antifeature", [f"ads {description}"])

    def antifeature_tracking(self, description: str) -> None:
        self._extend("antifeature", [f"tracking {description}"])

    def antifeature_miner(self, description: str) -> None:
        self._extend("antifeature", [f"miner {description}"])

    def hosted_at(self, url: str, script_id: Optional[str] = None) -> None:
        """Point ``updateURL``/``downloadURL`` at ``{url}/{id}.(meta|user).js``."""

        script_id = script_id or self.settings.id
        prefix = url if url.endswith("/") else f"{url}/"
        self.update_url = f"{prefix}{script_id}.meta.js"
        self.download_url = f"{prefix}{script_id}.user.js"

    def extra(self, key: str, *values: str) -> None:
        """Append free-form ``@key`` lines not covered by a declared property."""

        self.extra_properties.setdefault(key, []).extend(str(value) for value in values)

    def sort(self, comparator: Optional[Comparator]) -> None:
        """Order the block by *comparator*; ``name`` always stays first."""

        self.property_sorter = comparator

    def snapshot(self) -> Dict[str, str]:
        values = self.store.snapshot()
        for key, extra_values in self.extra_properties.items():
            merged = list(extra_values)
            if key in self.store:
                current = self.store.get(key)
                if isinstance(current, list):
                    merged = current + merged
                elif current is not None:
                    merged.insert(0, str(current))
            values[key] = str(merged)
        return values


__all__ = ["Comparator", "UserscriptMetadata"]
