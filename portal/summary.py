from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from google import genai

from portal.config import DEFAULT_GEMINI_MODEL
from portal.errors import AIUnavailable


logger = logging.getLogger(__name__)

SUMMARY_INSTRUCTION = (
    "Você é um assistente administrativo escolar. "
    "Resuma os dados deste munícipe de forma profissional e concisa (máximo 3 frases):"
)
NO_SUMMARY_TEXT = "Não foi possível gerar um resumo."
AI_ERROR_TEXT = "Erro ao processar análise com IA. Verifique se a chave da API Gemini está configurada."


def build_summary_prompt(record: Mapping[str, object]) -> str:
    lines = []
    for key, value in record.items():
        text = "" if value is None else str(value).strip()
        if text:
            lines.append(f"{key}: {text}")
    return SUMMARY_INSTRUCTION + "\n" + "\n".join(lines)


def request_summary(
    record: Mapping[str, object],
    *,
    api_key: str,
    model: str = DEFAULT_GEMINI_MODEL,
    client: Optional[Any] = None,
) -> str:
    if client is None:
        if not (api_key or "").strip():
            raise AIUnavailable("missing Gemini API key")
        client = genai.Client(api_key=api_key)

    prompt = build_summary_prompt(record)
    try:
        response = client.models.generate_content(model=model, contents=prompt)
    except Exception as exc:
        raise AIUnavailable(f"summary request failed: {exc}") from exc

    text = (getattr(response, "text", None) or "").strip()
    return text or NO_SUMMARY_TEXT


def summarize_record(
    record: Mapping[str, object],
    *,
    api_key: str,
    model: str = DEFAULT_GEMINI_MODEL,
    client: Optional[Any] = None,
) -> str:
    """Summary text for one record; failures come back as inline text."""
    try:
        return request_summary(record, api_key=api_key, model=model, client=client)
    except AIUnavailable as exc:
        logger.warning("AI summary unavailable: %s", exc.reason)
        return AI_ERROR_TEXT
