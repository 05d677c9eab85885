"""Core (UI-agnostic) portal logic.

This package contains:
- configuration (env vars + settings overrides)
- spreadsheet fetch (Google Sheets values API -> pandas)
- header resolution and schedule/person filters
- AI record summaries (Gemini)
- page payload builders (JSON-serializable, Altair -> Vega-Lite spec dict)
"""
