from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from portal.charts import to_vega_spec, weekday_bar
from portal.config import ColumnMapping
from portal.filters import WEEKDAYS, ScheduleFilters, matches_day
from portal.resolver import resolve_frame
from portal.search import DatasetProfile, category_options, filter_schedule, search_people
from portal.sheets import records_from_frame


def day_counts(resolved: pd.DataFrame) -> pd.DataFrame:
    """Records per weekday; a "Seg/Qua" record counts for both days."""
    rows = []
    for day in WEEKDAYS:
        hits = resolved["dia"].map(lambda v, d=day: matches_day(v, d)) if not resolved.empty else pd.Series(dtype=bool)
        rows.append({"day": day, "count": int(hits.sum())})
    return pd.DataFrame(rows, columns=["day", "count"])


def compute_schedule(profile: DatasetProfile, records: pd.DataFrame, filters: ScheduleFilters) -> Dict[str, Any]:
    matched = filter_schedule(records, profile, filters)
    if matched.empty:
        return {
            "filters": asdict(filters),
            "kpis": {"total": int(len(records)), "matched": 0, "days_covered": 0},
            "categories": category_options(records, profile),
            "rows": [],
            "charts": {},
        }

    resolved = resolve_frame(matched, profile.rules)
    counts = day_counts(resolved)
    rows = [
        {"fields": fields, "record": record}
        for fields, record in zip(resolved.to_dict(orient="records"), records_from_frame(matched))
    ]
    charts: Dict[str, Any] = {"by_day": to_vega_spec(weekday_bar(counts))}

    return {
        "filters": asdict(filters),
        "kpis": {
            "total": int(len(records)),
            "matched": int(len(matched)),
            "days_covered": int((counts["count"] > 0).sum()),
        },
        "categories": category_options(records, profile),
        "rows": rows,
        "charts": charts,
    }


def compute_people(records: pd.DataFrame, mapping: ColumnMapping, search_type: str, term: str) -> Dict[str, Any]:
    found = search_people(records, mapping, search_type, term)
    if found is None:
        return {"searched": False, "search_type": search_type, "count": 0, "rows": []}
    return {
        "searched": True,
        "search_type": search_type,
        "count": int(len(found)),
        "rows": records_from_frame(found),
    }
