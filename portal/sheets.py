from __future__ import annotations

import logging
from typing import List, Optional, Sequence
from urllib.parse import quote

import pandas as pd
import requests

from portal.config import PortalConfig
from portal.errors import SourceUnavailable


logger = logging.getLogger(__name__)

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"


def build_values_url(sheet_id: str, tab_name: str) -> str:
    return f"{SHEETS_API_BASE}/{quote(sheet_id, safe='')}/values/{quote(tab_name, safe='')}"


def _cell(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def drop_duplicate_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.loc[:, ~df.columns.duplicated()]


def rows_to_frame(rows: Optional[Sequence[Sequence[object]]]) -> pd.DataFrame:
    """Turn a values grid into records: row 0 is the header row.

    Short rows are padded with "" and cells past the last header are ignored.
    A blank header row still yields one (column-less) record per data row.
    """
    if not rows:
        return pd.DataFrame()
    headers = [_cell(h).strip() for h in rows[0]]

    width = len(headers)
    body: List[List[str]] = []
    for row in rows[1:]:
        cells = [_cell(v) for v in list(row or [])[:width]]
        cells.extend([""] * (width - len(cells)))
        body.append(cells)

    df = pd.DataFrame(body, columns=headers, index=range(len(body)), dtype=object)
    return drop_duplicate_columns(df).reset_index(drop=True)


def records_from_frame(df: pd.DataFrame) -> List[dict]:
    if df.empty:
        return []
    return df.to_dict(orient="records")


def fetch_sheet_records(
    config: PortalConfig,
    tab_name: str,
    *,
    session: Optional[requests.Session] = None,
) -> pd.DataFrame:
    """Read the full range of one tab and return it as a DataFrame of strings."""
    url = build_values_url(config.sheet_id, tab_name)
    params = {"key": config.access_key} if config.access_key else None
    http = session or requests
    try:
        response = http.get(url, params=params, timeout=config.request_timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        raise SourceUnavailable(tab_name, str(exc)) from exc
    except ValueError as exc:
        raise SourceUnavailable(tab_name, f"invalid JSON body: {exc}") from exc

    rows = payload.get("values") if isinstance(payload, dict) else None
    df = rows_to_frame(rows or [])
    logger.info("fetched tab %r: %d records", tab_name, len(df))
    return df
