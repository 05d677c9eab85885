from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import api.main as api_main
from portal.datasets import DatasetResult
from portal.summary import AI_ERROR_TEXT


@pytest.fixture
def client(monkeypatch, people, spaces, activities):
    for var in ("GEMINI_API_KEY", "API_KEY", "PORTAL_COL_NOME", "PORTAL_COL_EOL", "PORTAL_COL_CARTEIRINHA"):
        monkeypatch.delenv(var, raising=False)
    results = {
        "people": DatasetResult(name="people", records=people, status="ok"),
        "spaces": DatasetResult(name="spaces", records=spaces, status="ok"),
        "activities": DatasetResult(name="activities", records=activities, status="ok"),
    }
    monkeypatch.setitem(api_main._session, "results", results)
    monkeypatch.setitem(api_main._session, "overrides", {})
    return TestClient(api_main.app)


def test_meta_datasets(client):
    body = client.get("/meta/datasets").json()
    assert body["error"] is None
    assert body["datasets"]["spaces"]["count"] == 4


def test_people_search(client):
    body = client.post("/people/search", json={"search_type": "nome", "term": "ana"}).json()
    assert body["searched"] is True
    assert [r["NOME DO ALUNO"] for r in body["rows"]] == ["Ana Silva", "Mariana Souza"]

    blank = client.post("/people/search", json={"search_type": "eol", "term": " "}).json()
    assert blank["searched"] is False


def test_people_search_rejects_unknown_type(client):
    assert client.post("/people/search", json={"search_type": "cpf", "term": "1"}).status_code == 422


def test_spaces_and_activities(client):
    spaces = client.post("/spaces", json={"day": "Segunda"}).json()
    assert spaces["kpis"]["matched"] == 1
    activities = client.post("/activities", json={"category": "Livre"}).json()
    assert [r["fields"]["nome"] for r in activities["rows"]] == ["Xadrez"]


def test_summary_without_key_is_inline_text(client):
    body = client.post("/summary", json={"record": {"NOME DO ALUNO": "Ana"}}).json()
    assert body == {"summary": AI_ERROR_TEXT}


def test_refresh_and_settings(client, monkeypatch):
    seen = {}

    def fake_load(config, *, session=None, previous=None):
        seen["config"] = config
        seen["previous"] = previous
        return {
            "people": DatasetResult(name="people", status="failed", error="Erro ao carregar dados da planilha. Verifique a conexão."),
            "spaces": DatasetResult(name="spaces"),
            "activities": DatasetResult(name="activities"),
        }

    monkeypatch.setattr(api_main, "load_portal_data", fake_load)
    body = client.post("/settings", json={"sheet_id": "novo", "column_mapping": {"nome": "ALUNO"}}).json()
    assert seen["config"].sheet_id == "novo"
    assert seen["config"].column_mapping.nome == "ALUNO"
    assert seen["previous"]["people"].count == 3
    assert body["error"].startswith("Erro ao carregar")
    assert body["datasets"]["people"]["status"] == "failed"

    again = client.post("/refresh").json()
    assert again["datasets"]["spaces"]["status"] == "empty"


def test_settings_blank_access_key_clears_env_key(client, monkeypatch):
    monkeypatch.setenv("PORTAL_SHEETS_API_KEY", "env-key")
    seen = []

    def fake_load(config, *, session=None, previous=None):
        seen.append(config)
        return previous

    monkeypatch.setattr(api_main, "load_portal_data", fake_load)
    client.post("/settings", json={"sheet_id": "s"})
    client.post("/settings", json={"sheet_id": "s", "access_key": ""})
    assert seen[0].access_key == "env-key"
    assert seen[1].access_key == ""


def test_handler_errors_become_500(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("exploded")

    monkeypatch.setattr(api_main, "compute_schedule", boom)
    resp = client.post("/spaces", json={})
    assert resp.status_code == 500
    assert resp.json() == {"error": "exploded", "type": "RuntimeError"}
