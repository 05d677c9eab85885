"""HTML fragments for the Streamlit cards. Sheet values are always escaped."""
from __future__ import annotations

import html
from typing import Iterable


def card_header(title: str) -> str:
    return f"<div class='card'><div class='card-title'>{html.escape(str(title))}</div>"


def chips(values: Iterable[str]) -> str:
    return " ".join(f"<span class='chip'>{html.escape(str(v))}</span>" for v in values)


def schedule_chips(fields: dict, text_fields: Iterable[str], title_field: str) -> str:
    """Chips for the non-title text fields plus a day/time chip."""
    title = fields[title_field]
    parts = [fields[f] for f in text_fields if fields[f] != title]
    parts.append(f"{fields['dia']} · {fields['inicio']} - {fields['fim']}")
    return chips(parts)
