from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field


class ColumnMappingModel(BaseModel):
    carteirinha: Optional[str] = None
    eol: Optional[str] = None
    nome: Optional[str] = None


class SettingsModel(BaseModel):
    sheet_id: Optional[str] = None
    access_key: Optional[str] = None
    people_tab: Optional[str] = None
    spaces_tab: Optional[str] = None
    activities_tab: Optional[str] = None
    column_mapping: ColumnMappingModel = Field(default_factory=ColumnMappingModel)


class PersonSearchModel(BaseModel):
    search_type: Literal["carteirinha", "eol", "nome"] = "nome"
    term: str = ""


class ScheduleFiltersModel(BaseModel):
    query: str = ""
    category: str = "Todos"
    day: str = "Todos"


class SummaryModel(BaseModel):
    record: Dict[str, str] = Field(default_factory=dict)
