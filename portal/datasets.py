from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional

import pandas as pd
import requests

from portal.config import PortalConfig
from portal.errors import SourceUnavailable
from portal.sheets import fetch_sheet_records


logger = logging.getLogger(__name__)

DATASET_NAMES = ("people", "spaces", "activities")
PRIMARY_DATASET = "people"
PEOPLE_ERROR_MESSAGE = "Erro ao carregar dados da planilha. Verifique a conexão."

Status = Literal["ok", "empty", "failed"]


@dataclass(frozen=True)
class DatasetResult:
    name: str
    records: pd.DataFrame = field(default_factory=pd.DataFrame)
    status: Status = "empty"
    error: Optional[str] = None

    @property
    def count(self) -> int:
        return int(len(self.records))


def load_dataset(
    config: PortalConfig,
    name: str,
    tab: str,
    *,
    session: Optional[requests.Session] = None,
    previous: Optional[DatasetResult] = None,
) -> DatasetResult:
    """Fetch one tab; a failure becomes a "failed" result, never an exception."""
    try:
        df = fetch_sheet_records(config, tab, session=session)
    except SourceUnavailable as exc:
        kept = previous.records if previous is not None else pd.DataFrame()
        return DatasetResult(name=name, records=kept, status="failed", error=str(exc))
    return DatasetResult(name=name, records=df, status="ok" if not df.empty else "empty")


def load_portal_data(
    config: PortalConfig,
    *,
    session: Optional[requests.Session] = None,
    previous: Optional[Dict[str, DatasetResult]] = None,
) -> Dict[str, DatasetResult]:
    previous = previous or {}
    out: Dict[str, DatasetResult] = {}
    for name, tab in config.tabs.items():
        result = load_dataset(config, name, tab, session=session, previous=previous.get(name))
        if result.status == "failed":
            if name == PRIMARY_DATASET:
                logger.error("people dataset failed to load: %s", result.error)
                result = DatasetResult(name=name, records=result.records, status="failed", error=PEOPLE_ERROR_MESSAGE)
            else:
                # Secondary tabs are optional; the portal keeps working without them.
                logger.warning("%s dataset unavailable, using empty dataset: %s", name, result.error)
                result = DatasetResult(name=name, records=pd.DataFrame(), status="empty", error=result.error)
        out[name] = result
    return out


def people_error(results: Dict[str, DatasetResult]) -> Optional[str]:
    people = results.get(PRIMARY_DATASET)
    if people is not None and people.status == "failed":
        return people.error
    return None


def dataset_summary(results: Dict[str, DatasetResult]) -> Dict[str, Dict[str, object]]:
    summary: Dict[str, Dict[str, object]] = {}
    for name in DATASET_NAMES:
        res = results.get(name) or DatasetResult(name=name)
        summary[name] = {
            "status": res.status,
            "count": res.count,
            "columns": [str(c) for c in res.records.columns],
        }
    return summary
