from __future__ import annotations

from typing import Dict, List, Optional
from urllib.parse import unquote

import pandas as pd
import pytest
import requests

from portal.config import PortalConfig
from portal.sheets import rows_to_frame


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, bad_json: bool = False):
        self._payload = payload
        self.status_code = status_code
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; responses keyed by tab name."""

    def __init__(self, responses: Dict[str, object]):
        self.responses = responses
        self.calls: List[dict] = []

    def get(self, url, params=None, timeout=None):
        tab = unquote(url.rsplit("/", 1)[-1])
        self.calls.append({"url": url, "tab": tab, "params": params, "timeout": timeout})
        resp = self.responses.get(tab)
        if isinstance(resp, Exception):
            raise resp
        if resp is None:
            return FakeResponse({"error": "not found"}, status_code=400)
        return resp


SPACE_ROWS = [
    ["Espaço", "Atividade", "Responsável", "Dia", "Início", "Término"],
    ["Sala 1", "Judô", "Carlos", "Seg/Qua/Sex", "08:00", "09:00"],
    ["Teatro", "Ensaio Coral", "Marina", "Terça", "14:00", "16:00"],
    ["Sala 1", "", "", "Quinta"],
    ["Quadra", "Futsal", "Carlos", "Sáb", "09:00", "11:00"],
]

ACTIVITY_ROWS = [
    ["Atividade", "Público Alvo", "Dias", "Horário", "Professor"],
    ["Capoeira", "Infantil", "Seg/Qua", "10:00", "Mestre Jó"],
    ["Hidroginástica", "Terceira Idade", "Ter/Qui", "08:00", "Lúcia"],
    ["Xadrez", "", "Sábado", "", ""],
]

PEOPLE_ROWS = [
    ["NOME DO ALUNO", "CÓDIGO EOL", "CARTEIRINHA"],
    ["Ana Silva", "123", "C-01"],
    ["Bruno Costa", "456", "C-02"],
    ["Mariana Souza", "789", "C-03"],
]


@pytest.fixture
def config() -> PortalConfig:
    return PortalConfig(sheet_id="sheet-123", access_key="k-1")


@pytest.fixture
def spaces() -> pd.DataFrame:
    return rows_to_frame(SPACE_ROWS)


@pytest.fixture
def activities() -> pd.DataFrame:
    return rows_to_frame(ACTIVITY_ROWS)


@pytest.fixture
def people() -> pd.DataFrame:
    return rows_to_frame(PEOPLE_ROWS)


def make_session(people: Optional[object] = None, spaces: Optional[object] = None, activities: Optional[object] = None) -> FakeSession:
    responses = {}
    for tab, value in (("Página1", people), ("Espaços", spaces), ("Atividades", activities)):
        if value is not None:
            responses[tab] = value
    return FakeSession(responses)
