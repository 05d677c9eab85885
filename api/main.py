from __future__ import annotations

import logging
import math
from typing import Dict, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import PersonSearchModel, ScheduleFiltersModel, SettingsModel, SummaryModel
from portal.config import PortalConfig, load_config
from portal.datasets import DatasetResult, dataset_summary, load_portal_data, people_error
from portal.filters import normalize_filters
from portal.metrics_schedule import compute_people, compute_schedule
from portal.search import ACTIVITIES_PROFILE, SPACES_PROFILE
from portal.summary import summarize_record


app = FastAPI(title="Portal Caminho do Mar API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8501"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory session: settings overrides and the last loaded datasets.
_session: Dict[str, object] = {"overrides": {}, "results": None}


def current_config() -> PortalConfig:
    return load_config(_session["overrides"])  # type: ignore[arg-type]


def refresh_data() -> Dict[str, DatasetResult]:
    previous = _session.get("results") or None
    results = load_portal_data(current_config(), previous=previous)  # type: ignore[arg-type]
    _session["results"] = results
    return results


def get_data() -> Dict[str, DatasetResult]:
    results: Optional[Dict[str, DatasetResult]] = _session.get("results")  # type: ignore[assignment]
    if results is None:
        results = refresh_data()
    return results


def _records(name: str) -> pd.DataFrame:
    res = get_data().get(name)
    return res.records if res is not None else pd.DataFrame()


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _datasets_payload(results: Dict[str, DatasetResult]) -> Dict[str, object]:
    return {"datasets": dataset_summary(results), "error": people_error(results)}


@app.get("/meta/datasets")
def meta_datasets():
    try:
        return _json(_datasets_payload(get_data()))
    except Exception as exc:
        logger.exception("meta_datasets failed")
        return _error(exc)


@app.post("/refresh")
def refresh():
    try:
        return _json(_datasets_payload(refresh_data()))
    except Exception as exc:
        logger.exception("refresh failed")
        return _error(exc)


@app.post("/settings")
def settings(model: SettingsModel):
    try:
        # Only fields actually sent count; "" is passed through so a key can be cleared.
        raw = model.model_dump(exclude_none=True)
        raw["column_mapping"] = {k: v for k, v in raw.get("column_mapping", {}).items() if v}
        _session["overrides"] = raw
        return _json(_datasets_payload(refresh_data()))
    except Exception as exc:
        logger.exception("settings failed")
        return _error(exc)


@app.post("/people/search")
def people_search(body: PersonSearchModel):
    try:
        mapping = current_config().column_mapping
        return _json(compute_people(_records("people"), mapping, body.search_type, body.term))
    except Exception as exc:
        logger.exception("people_search failed")
        return _error(exc)


@app.post("/spaces")
def spaces(filters: ScheduleFiltersModel):
    try:
        f = normalize_filters(filters.model_dump())
        return _json(compute_schedule(SPACES_PROFILE, _records("spaces"), f))
    except Exception as exc:
        logger.exception("spaces failed")
        return _error(exc)


@app.post("/activities")
def activities(filters: ScheduleFiltersModel):
    try:
        f = normalize_filters(filters.model_dump())
        return _json(compute_schedule(ACTIVITIES_PROFILE, _records("activities"), f))
    except Exception as exc:
        logger.exception("activities failed")
        return _error(exc)


@app.post("/summary")
def summary(body: SummaryModel):
    try:
        cfg = current_config()
        text = summarize_record(body.record, api_key=cfg.gemini_api_key, model=cfg.gemini_model)
        return _json({"summary": text})
    except Exception as exc:
        logger.exception("summary failed")
        return _error(exc)
