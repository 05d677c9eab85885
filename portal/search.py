from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from portal.config import ColumnMapping
from portal.filters import ALL, ScheduleFilters, matches_day
from portal.resolver import ACTIVITY_RULES, SPACE_RULES, FieldRule, find_exact_key, resolve_frame


SEARCH_TYPES = ("carteirinha", "eol", "nome")


@dataclass(frozen=True)
class DatasetProfile:
    name: str
    rules: Tuple[FieldRule, ...]
    text_fields: Tuple[str, ...]
    category_field: str
    title_field: str


SPACES_PROFILE = DatasetProfile(
    name="spaces",
    rules=SPACE_RULES,
    text_fields=("atividade", "responsavel", "espaco"),
    category_field="espaco",
    title_field="atividade",
)

ACTIVITIES_PROFILE = DatasetProfile(
    name="activities",
    rules=ACTIVITY_RULES,
    text_fields=("nome", "responsavel", "espaco"),
    category_field="publico",
    title_field="nome",
)


def search_people(
    records: pd.DataFrame,
    mapping: ColumnMapping,
    search_type: str,
    term: str,
) -> Optional[pd.DataFrame]:
    """Person lookup by one configured column.

    Returns None when the term is blank (nothing computed), otherwise the
    matching records in sheet order, possibly empty.
    """
    header = mapping.header_for(search_type)
    q = (term or "").strip().lower()
    if not q:
        return None
    key = find_exact_key([str(c) for c in records.columns], header)
    if key is None or records.empty:
        return records.iloc[0:0]
    mask = records[key].fillna("").astype(str).str.lower().str.contains(q, regex=False)
    return records[mask]


@dataclass(frozen=True)
class PersonSearchState:
    has_searched: bool = False
    results: pd.DataFrame = field(default_factory=pd.DataFrame)


def submit_person_search(
    state: PersonSearchState,
    records: pd.DataFrame,
    mapping: ColumnMapping,
    search_type: str,
    term: str,
) -> PersonSearchState:
    found = search_people(records, mapping, search_type, term)
    if found is None:
        return PersonSearchState(has_searched=True, results=state.results)
    return PersonSearchState(has_searched=True, results=found)


def filter_schedule(records: pd.DataFrame, profile: DatasetProfile, filters: ScheduleFilters) -> pd.DataFrame:
    """AND of free text, category and day criteria; keeps the original order."""
    if records.empty or filters.is_empty:
        return records
    resolved = resolve_frame(records, profile.rules)
    mask = pd.Series(True, index=records.index)

    q = filters.query.strip().lower()
    if q:
        text_hit = pd.Series(False, index=records.index)
        for f in profile.text_fields:
            text_hit |= resolved[f].astype(str).str.lower().str.contains(q, regex=False)
        mask &= text_hit

    if filters.category != ALL:
        mask &= resolved[profile.category_field] == filters.category

    if filters.day != ALL:
        mask &= resolved["dia"].map(lambda v: matches_day(v, filters.day)).astype(bool)

    return records[mask]


def category_options(records: pd.DataFrame, profile: DatasetProfile) -> List[str]:
    if records.empty:
        return []
    resolved = resolve_frame(records, profile.rules)
    values = resolved[profile.category_field].dropna().astype(str).unique().tolist()
    return sorted(values, key=lambda s: s.casefold())
