from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def weekday_bar(counts: pd.DataFrame, *, title: str = "Registros") -> alt.Chart:
    """Bar chart of a (day, count) frame, days kept in the given order."""
    order = counts["day"].tolist()
    return (
        alt.Chart(counts)
        .mark_bar()
        .encode(
            x=alt.X("day:N", title="Dia", sort=order, axis=alt.Axis(grid=False, labelAngle=0)),
            y=alt.Y("count:Q", title=title, axis=alt.Axis(format="d", gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=[alt.Tooltip("day:N", title="Dia"), alt.Tooltip("count:Q", title=title)],
        )
    )
