"""Compiler opt-ins derived from the target engine and granted APIs."""

from __future__ import annotations

from typing import Iterable, List, Mapping

from userskripter.project import GREASE_MONKEY, TAMPER_MONKEY, UserskripterSettings

PACKAGE = "net.ormr.userskripter"
ENGINES_PACKAGE = f"{PACKAGE}.engine"
GREASE_MONKEY_PATH = f"{ENGINES_PACKAGE}.greasemonkey"
TAMPER_MONKEY_PATH = f"{ENGINES_PACKAGE}.tampermonkey"
UNSAFE_WINDOW_COMPATIBLE = f"{ENGINES_PACKAGE}.UnsafeWindowCompatibleScriptEngine"

GM_GRANTS: Mapping[str, str] = {
    "GM.setValue": "GrantGMSetValue",
    "GM.getValue": "GrantGMGetValue",
    "GM.deleteValue": "GrantGMDeleteValue",
    "GM.listValues": "GrantGMListValues",
    "GM.getResourceUrl": "GrantGMGetResourceUrl",
    "GM.notification": "GrantGMNotification",
    "GM.openInTab": "GrantGMOpenInTab",
    "GM.registerMenuCommand": "GrantGMRegisterMenuCommand",
    "GM.setClipboard": "GrantGMSetClipboard",
    "GM.xmlHttpRequest": "GrantGMXmlHttpRequest",
    "unsafeWindow": "GrantUnsafeWindow",
}

TM_GRANTS: Mapping[str, str] = {
    "GM.addStyle": "GrantTMAddStyle",
    "GM.addElement": "GrantTMAddElement",
    "GM.addValueChangeListener": "GrantTMAddValueChangeListener",
    "GM.removeValueChangeListener": "GrantTMRemoveValueChangeListener",
    "GM.log": "GrantTMLog",
    "GM.getResourceText": "GrantTMGetResourceText",
    "GM.unregisterMenuCommand": "GrantTMUnregisterMenuCommand",
    "GM.download": "GrantTMDownload",
    "GM.getTab": "GrantTMGetTab",
    "GM.saveTab": "GrantTMSaveTab",
    "GM.getTabs": "GrantTMGetTabs",
}

_ENGINE_MARKERS = {
    GREASE_MONKEY: f"{ENGINES_PACKAGE}.ScriptEngineGreaseMonkey",
    TAMPER_MONKEY: f"{ENGINES_PACKAGE}.ScriptEngineTamperMonkey",
}


def _grant_opt_ins(grants: Iterable[str], table: Mapping[str, str], path: str) -> List[str]:
    return [f"{path}.{table[grant]}" for grant in grants if grant in table]


def resolve_opt_ins(settings: UserskripterSettings, grants: Iterable[str]) -> List[str]:
    """Return fully qualified opt-in annotations for *grants*.

    GreaseMonkey APIs are available in virtually every engine, so their
    grants always map; engine specific tables are added on top.
    """

    grants = list(grants or ())
    opt_ins = _grant_opt_ins(grants, GM_GRANTS, GREASE_MONKEY_PATH)
    opt_ins.extend([_ENGINE_MARKERS[settings.script_engine], UNSAFE_WINDOW_COMPATIBLE])
    if settings.script_engine == TAMPER_MONKEY:
        opt_ins.extend(_grant_opt_ins(grants, TM_GRANTS, TAMPER_MONKEY_PATH))
    return opt_ins


def compiler_arguments(opt_ins: Iterable[str]) -> List[str]:
    return [f"-opt-in={annotation}" for annotation in opt_ins]


__all__ = [
    "GM_GRANTS",
    "TM_GRANTS",
    "UNSAFE_WINDOW_COMPATIBLE",
    "compiler_arguments",
    "resolve_opt_ins",
]
