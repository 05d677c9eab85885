from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd


@dataclass(frozen=True)
class FieldRule:
    field: str
    candidates: Tuple[str, ...]
    fallback: str = "-"
    priority: int = 100


# Lower priority number resolves first and claims its header before the others.
# A field may have several rules; a later one only runs while the field is unresolved.
RESPONSAVEL_TERMS = ("responsável", "responsavel", "professor", "educador", "instrutor", "monitor", "oficineiro")
DIA_TERMS = ("dia", "semana")
INICIO_TERMS = ("início", "inicio", "horário", "horario", "hora", "entrada")
FIM_TERMS = ("término", "termino", "fim", "saída", "saida")

SPACE_RULES: Tuple[FieldRule, ...] = (
    FieldRule("atividade", ("atividade", "evento", "oficina", "curso", "ocupação", "ocupacao"), fallback="Livre", priority=10),
    FieldRule("espaco", ("espaço", "espaco", "sala", "local", "ambiente"), priority=20),
    FieldRule("responsavel", RESPONSAVEL_TERMS, priority=30),
    FieldRule("publico", ("público", "publico", "faixa", "idade", "turma"), priority=40),
    FieldRule("dia", DIA_TERMS, priority=50),
    FieldRule("fim", FIM_TERMS, priority=60),
    FieldRule("inicio", INICIO_TERMS, priority=70),
)

ACTIVITY_RULES: Tuple[FieldRule, ...] = (
    FieldRule("nome", ("atividade", "oficina", "curso", "modalidade", "título", "titulo"), fallback="Sem atividade", priority=10),
    FieldRule("espaco", ("espaço", "espaco", "sala", "local"), priority=20),
    FieldRule("responsavel", RESPONSAVEL_TERMS, priority=30),
    # "Nome do Professor" is already taken by responsavel at this point.
    FieldRule("nome", ("nome",), fallback="Sem atividade", priority=35),
    FieldRule("publico", ("público", "publico", "faixa etária", "faixa etaria", "idade"), fallback="Livre", priority=40),
    FieldRule("dia", DIA_TERMS, priority=50),
    FieldRule("fim", FIM_TERMS, priority=60),
    FieldRule("inicio", INICIO_TERMS, priority=70),
)


def ordered_rules(rules: Iterable[FieldRule]) -> List[FieldRule]:
    # sorted() is stable, so equal priorities keep table order.
    return sorted(rules, key=lambda r: r.priority)


def field_rules(rules: Iterable[FieldRule]) -> List[FieldRule]:
    """First rule per field, in resolution order; it carries the field's fallback."""
    seen: Dict[str, FieldRule] = {}
    for rule in ordered_rules(rules):
        seen.setdefault(rule.field, rule)
    return list(seen.values())


def _word_start(candidate: str) -> "re.Pattern[str]":
    return re.compile(r"(?<!\w)" + re.escape(candidate.lower()))


def match_header(headers: Sequence[str], candidates: Iterable[str], exclude: Iterable[str] = ()) -> Optional[str]:
    """First header containing a candidate at the start of a word.

    "Sala 2" matches "sala" and "Dias" matches "dia", but "Recursos" does not
    match "curso" and "Atividade" does not match "idade".
    """
    patterns = [_word_start(c) for c in candidates]
    skip = set(exclude)
    for key in headers:
        if key in skip:
            continue
        k = str(key).lower()
        if any(p.search(k) for p in patterns):
            return key
    return None


def resolve_keys(headers: Sequence[str], rules: Iterable[FieldRule]) -> Dict[str, Optional[str]]:
    """Map each semantic field to the header it claims (or None).

    A header claimed by a higher-priority field is never offered to a later one.
    """
    claimed: List[str] = []
    keys: Dict[str, Optional[str]] = {}
    for rule in ordered_rules(rules):
        if keys.get(rule.field) is not None:
            continue
        key = match_header(headers, rule.candidates, exclude=claimed)
        keys[rule.field] = key
        if key is not None:
            claimed.append(key)
    return keys


def _clean(value: object) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


def resolve_fields(record: Mapping[str, object], rules: Iterable[FieldRule]) -> Dict[str, str]:
    rules = list(rules)
    keys = resolve_keys(list(record.keys()), rules)
    out: Dict[str, str] = {}
    for rule in field_rules(rules):
        key = keys[rule.field]
        value = _clean(record.get(key)) if key is not None else ""
        out[rule.field] = value or rule.fallback
    return out


def resolve_frame(records: pd.DataFrame, rules: Iterable[FieldRule]) -> pd.DataFrame:
    """Column-wise resolve_fields: one row per record, same index."""
    rules = list(rules)
    keys = resolve_keys([str(c) for c in records.columns], rules)
    columns = [r.field for r in field_rules(rules)]
    out = pd.DataFrame(index=records.index, columns=columns, dtype=object)
    for rule in field_rules(rules):
        key = keys[rule.field]
        if key is None or records.empty:
            out[rule.field] = rule.fallback
            continue
        values = records[key].map(_clean)
        out[rule.field] = values.where(values != "", rule.fallback)
    return out


def find_exact_key(headers: Iterable[str], name: str) -> Optional[str]:
    target = (name or "").lower()
    for key in headers:
        if str(key).lower() == target:
            return key
    return None
