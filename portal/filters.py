from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Optional


ALL = "Todos"
WEEKDAYS = ("Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado", "Domingo")


@dataclass(frozen=True)
class ScheduleFilters:
    query: str = ""
    category: str = ALL
    day: str = ALL

    @property
    def is_empty(self) -> bool:
        return not self.query and self.category == ALL and self.day == ALL


def fold(text: object) -> str:
    """Lowercase without accents, for day comparisons."""
    s = unicodedata.normalize("NFKD", str(text or ""))
    return "".join(ch for ch in s if not unicodedata.combining(ch)).lower().strip()


def day_token(value: object) -> str:
    """Canonical day token: first three letters, unaccented ("Sábado" -> "sab")."""
    letters = "".join(ch for ch in fold(value) if ch.isalpha())
    return letters[:3]


def matches_day(day_value: object, selected: Optional[str]) -> bool:
    if not selected or selected == ALL:
        return True
    token = day_token(selected)
    if not token:
        return True
    return token in fold(day_value)


def _as_choice(value: object) -> str:
    if value is None:
        return ALL
    s = str(value).strip()
    return s or ALL


def normalize_filters(raw: Optional[dict]) -> ScheduleFilters:
    raw = raw or {}
    query = str(raw.get("query") or "").strip()
    return ScheduleFilters(
        query=query,
        category=_as_choice(raw.get("category")),
        day=_as_choice(raw.get("day")),
    )
