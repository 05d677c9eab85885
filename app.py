import logging
from contextlib import contextmanager
from typing import Dict, Optional

import pandas as pd
import streamlit as st

from portal.config import load_config
from portal.datasets import DatasetResult, load_portal_data, people_error
from portal.display import card_header, schedule_chips
from portal.filters import ALL, WEEKDAYS, normalize_filters
from portal.metrics_schedule import compute_schedule
from portal.resolver import find_exact_key
from portal.search import (
    ACTIVITIES_PROFILE,
    SEARCH_TYPES,
    SPACES_PROFILE,
    DatasetProfile,
    PersonSearchState,
    category_options,
    submit_person_search,
)
from portal.summary import summarize_record

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

SEARCH_LABELS = {"carteirinha": "Carteirinha", "eol": "Código EOL", "nome": "Nome"}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 2px 10px;font-size: 0.8rem;color: #374151;margin-right: 4px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(card_header(title), unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def summary_button(record: Dict[str, str], key: str):
    """AI summary for one card; its state lives under its own session key."""
    state_key = f"summary_{key}"
    if st.button("Análise com Inteligência Artificial", key=f"btn_{key}"):
        cfg = st.session_state["config"]
        with st.spinner("Processando perfil..."):
            st.session_state[state_key] = summarize_record(record, api_key=cfg.gemini_api_key, model=cfg.gemini_model)
    if st.session_state.get(state_key):
        st.info(st.session_state[state_key])


def render_record(record: Dict[str, str], title: str, key: str):
    with card(title):
        for k, v in record.items():
            if v:
                st.markdown(f"**{k}:** {v}")
        summary_button(record, key)


def load_data(previous: Optional[Dict[str, DatasetResult]] = None):
    with st.spinner("Carregando planilha..."):
        st.session_state["datasets"] = load_portal_data(st.session_state["config"], previous=previous)


# ---------- Settings + data ----------
st.set_page_config(page_title="Portal Caminho do Mar", layout="wide")
inject_base_styles()
st.title("Portal Caminho do Mar")
st.caption("Consulta Pública")

if "overrides" not in st.session_state:
    st.session_state["overrides"] = {}
st.session_state["config"] = load_config(st.session_state["overrides"])
cfg = st.session_state["config"]

with st.sidebar:
    st.markdown("### Configurações")
    with st.form("settings"):
        sheet_id = st.text_input("ID da Planilha (Spreadsheet ID)", value=cfg.sheet_id)
        access_key = st.text_input("Google Sheets API Key (opcional se pública)", value=cfg.access_key, type="password")
        people_tab = st.text_input("Aba de munícipes", value=cfg.people_tab)
        spaces_tab = st.text_input("Aba de espaços", value=cfg.spaces_tab)
        activities_tab = st.text_input("Aba de atividades", value=cfg.activities_tab)
        st.markdown("Colunas da busca")
        col_cart = st.text_input("Carteirinha", value=cfg.column_mapping.carteirinha)
        col_eol = st.text_input("Código EOL", value=cfg.column_mapping.eol)
        col_nome = st.text_input("Nome do Aluno", value=cfg.column_mapping.nome)
        if st.form_submit_button("Salvar"):
            st.session_state["overrides"] = {
                "sheet_id": sheet_id,
                "access_key": access_key,
                "people_tab": people_tab,
                "spaces_tab": spaces_tab,
                "activities_tab": activities_tab,
                "column_mapping": {"carteirinha": col_cart, "eol": col_eol, "nome": col_nome},
            }
            st.session_state["config"] = load_config(st.session_state["overrides"])
            load_data(st.session_state.get("datasets"))
    if st.button("Atualizar dados"):
        load_data(st.session_state.get("datasets"))

if "datasets" not in st.session_state:
    load_data()
datasets: Dict[str, DatasetResult] = st.session_state["datasets"]
cfg = st.session_state["config"]

err = people_error(datasets)
if err:
    st.error(err)

tab_people, tab_spaces, tab_activities = st.tabs(["Munícipes", "Espaços", "Atividades"])

# ---------- People ----------
with tab_people:
    st.subheader("Consultar Munícipe")
    st.caption("Busque por nome, EOL ou carteirinha.")
    with st.form("people_search"):
        search_type = st.radio("Buscar por", SEARCH_TYPES, index=2, format_func=lambda t: SEARCH_LABELS[t], horizontal=True)
        term = st.text_input("Termo de busca", "")
        submitted = st.form_submit_button("Buscar")
    state: PersonSearchState = st.session_state.get("person_search", PersonSearchState())
    if submitted:
        people = datasets["people"].records
        state = submit_person_search(state, people, cfg.column_mapping, search_type, term)
        st.session_state["person_search"] = state
    if state.has_searched:
        results: pd.DataFrame = state.results
        if results.empty:
            st.info("Nenhum registro encontrado.")
        name_key = find_exact_key(results.columns, cfg.column_mapping.nome)
        for idx, record in results.iterrows():
            title = (record.get(name_key) if name_key else "") or "Munícipe"
            render_record(record.to_dict(), str(title), key=f"people_{idx}")


# ---------- Spaces / Activities ----------
def render_schedule(profile: DatasetProfile, records: pd.DataFrame, label: str):
    if records.empty:
        st.info(f"Nenhum dado de {label.lower()} disponível.")
        return
    c1, c2, c3 = st.columns([4, 3, 3])
    query = c1.text_input("Buscar", "", key=f"{profile.name}_query")
    categories = category_options(records, profile)
    category = c2.selectbox("Categoria", [ALL] + categories, key=f"{profile.name}_category")
    day = c3.selectbox("Dia", [ALL] + list(WEEKDAYS), key=f"{profile.name}_day")

    payload = compute_schedule(profile, records, normalize_filters({"query": query, "category": category, "day": day}))
    kpis = payload["kpis"]
    cols = st.columns(3)
    cols[0].metric("Registros", kpis["total"])
    cols[1].metric("Encontrados", kpis["matched"])
    cols[2].metric("Dias com agenda", kpis["days_covered"])
    if payload["charts"].get("by_day"):
        st.vega_lite_chart(payload["charts"]["by_day"], use_container_width=True)

    for i, row in enumerate(payload["rows"]):
        fields = row["fields"]
        title = fields[profile.title_field]
        st.markdown(schedule_chips(fields, profile.text_fields, profile.title_field), unsafe_allow_html=True)
        render_record(row["record"], title, key=f"{profile.name}_{i}")


with tab_spaces:
    render_schedule(SPACES_PROFILE, datasets["spaces"].records, "Espaços")

with tab_activities:
    render_schedule(ACTIVITIES_PROFILE, datasets["activities"].records, "Atividades")
