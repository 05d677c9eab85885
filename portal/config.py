from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


DEFAULT_PEOPLE_TAB = "Página1"
DEFAULT_SPACES_TAB = "Espaços"
DEFAULT_ACTIVITIES_TAB = "Atividades"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_REQUEST_TIMEOUT = 15.0

ENV_VARS = {
    "sheet_id": "PORTAL_SHEET_ID",
    "access_key": "PORTAL_SHEETS_API_KEY",
    "people_tab": "PORTAL_PEOPLE_TAB",
    "spaces_tab": "PORTAL_SPACES_TAB",
    "activities_tab": "PORTAL_ACTIVITIES_TAB",
    "gemini_model": "PORTAL_GEMINI_MODEL",
    "request_timeout": "PORTAL_REQUEST_TIMEOUT",
}

COLUMN_ENV_VARS = {
    "carteirinha": "PORTAL_COL_CARTEIRINHA",
    "eol": "PORTAL_COL_EOL",
    "nome": "PORTAL_COL_NOME",
}

# Credentials an explicit empty setting may clear.
CLEARABLE = ("access_key", "gemini_api_key")


@dataclass(frozen=True)
class ColumnMapping:
    carteirinha: str = "CARTEIRINHA"
    eol: str = "CÓDIGO EOL"
    nome: str = "NOME DO ALUNO"

    def header_for(self, search_type: str) -> str:
        if search_type not in {"carteirinha", "eol", "nome"}:
            raise ValueError(f"unknown search type: {search_type!r}")
        return getattr(self, search_type)


@dataclass(frozen=True)
class PortalConfig:
    sheet_id: str = ""
    access_key: str = ""
    people_tab: str = DEFAULT_PEOPLE_TAB
    spaces_tab: str = DEFAULT_SPACES_TAB
    activities_tab: str = DEFAULT_ACTIVITIES_TAB
    column_mapping: ColumnMapping = field(default_factory=ColumnMapping)
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def tabs(self) -> dict:
        return {"people": self.people_tab, "spaces": self.spaces_tab, "activities": self.activities_tab}


def _pick(value: object, default: str) -> str:
    if value is None:
        return default
    s = str(value).strip()
    return s or default


def _override(raw: Mapping[str, object], name: str, current: str) -> str:
    """Settings value for one field. Missing or None keeps `current`.

    An explicit blank clears credentials (e.g. to go back to anonymous reads);
    for every other field it keeps `current`.
    """
    value = raw.get(name)
    if value is None:
        return current
    s = str(value).strip()
    if not s and name in CLEARABLE:
        return ""
    return s or current


def _as_timeout(value: object, default: float) -> float:
    try:
        out = float(value)  # type: ignore[arg-type]
    except Exception:
        return default
    return out if out > 0 else default


def load_config(overrides: Optional[Mapping[str, object]] = None, *, environ: Optional[Mapping[str, str]] = None) -> PortalConfig:
    """Build the portal config from env vars, then apply settings overrides.

    Blank override values keep whatever the environment (or the default) says,
    so a half-filled settings form never wipes the sheet id. The exception is
    the credentials in CLEARABLE: an explicit "" there removes the key.
    """
    env = os.environ if environ is None else environ
    raw = dict(overrides or {})

    base = PortalConfig()
    values = {}
    for name, var in ENV_VARS.items():
        values[name] = _pick(env.get(var), str(getattr(base, name)))
    gemini_key = _pick(env.get("GEMINI_API_KEY"), _pick(env.get("API_KEY"), ""))

    for name in ENV_VARS:
        values[name] = _override(raw, name, values[name])
    gemini_key = _override(raw, "gemini_api_key", gemini_key)

    cols_raw = raw.get("column_mapping") or {}
    if isinstance(cols_raw, ColumnMapping):
        cols_raw = {k: getattr(cols_raw, k) for k in COLUMN_ENV_VARS}
    default_cols = ColumnMapping()
    cols = {}
    for name, var in COLUMN_ENV_VARS.items():
        from_env = _pick(env.get(var), getattr(default_cols, name))
        cols[name] = _pick(cols_raw.get(name), from_env)

    return PortalConfig(
        sheet_id=values["sheet_id"],
        access_key=values["access_key"],
        people_tab=values["people_tab"],
        spaces_tab=values["spaces_tab"],
        activities_tab=values["activities_tab"],
        column_mapping=ColumnMapping(**cols),
        gemini_api_key=gemini_key,
        gemini_model=values["gemini_model"],
        request_timeout=_as_timeout(values["request_timeout"], DEFAULT_REQUEST_TIMEOUT),
    )
