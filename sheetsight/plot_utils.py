import logging
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from sheetsight.data_utils import Row, Sheet, numeric_columns, raw_value

logger = logging.getLogger(__name__)

CHART_KINDS = ("bar", "line")
MAX_TICK_LABELS = 30


@dataclass(frozen=True)
class AxisOptions:
    all_columns: List[str]
    numeric_columns: List[str]


@dataclass(frozen=True)
class ChartSelection:
    chart_kind: str = "bar"
    x_column: Optional[str] = None
    y_column: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.x_column) and bool(self.y_column)


@dataclass(frozen=True)
class PreparedChart:
    """What the renderer gets: raw rows plus the two column keys."""
    chart_kind: str
    rows: List[Row]
    x_column: str
    y_column: str


def axis_options(sheet: Sheet) -> AxisOptions:
    """Any header is an X candidate; Y needs at least one numeric cell."""
    return AxisOptions(all_columns=list(sheet.headers), numeric_columns=numeric_columns(sheet))


def prepare_chart(sheet: Sheet, selection: ChartSelection) -> Optional[PreparedChart]:
    """None means "no chart": an axis is still unset."""
    if not selection.is_complete:
        return None
    if selection.chart_kind not in CHART_KINDS:
        raise ValueError(f"Unsupported chart kind: {selection.chart_kind}")
    return PreparedChart(
        chart_kind=selection.chart_kind,
        rows=sheet.rows,
        x_column=selection.x_column,
        y_column=selection.y_column,
    )


def render_chart(prepared: PreparedChart) -> BytesIO:
    """
    Draw one bar (or line point) per row and return a PNG buffer.
    Y cells that are missing or not numeric are left as gaps.
    """
    x_values = [raw_value(row.get(prepared.x_column)) for row in prepared.rows]
    y_values = pd.to_numeric(
        pd.Series([raw_value(row.get(prepared.y_column)) for row in prepared.rows], dtype=object),
        errors='coerce',
    )
    positions = list(range(len(x_values)))

    with sns.axes_style("darkgrid"):
        fig, ax = plt.subplots(figsize=(10, 6))
        try:
            if prepared.chart_kind == 'bar':
                ax.bar(positions, y_values, color="#0284c7")
            else:
                ax.plot(positions, y_values, color="#0284c7", marker='o')

            step = max(1, len(positions) // MAX_TICK_LABELS)
            ax.set_xticks(positions[::step])
            ax.set_xticklabels(["" if x is None else str(x) for x in x_values[::step]], rotation=45, ha="right")
            ax.set_xlabel(prepared.x_column)
            ax.set_ylabel(prepared.y_column)
            ax.set_title(f'{prepared.chart_kind.title()} Chart')
            fig.tight_layout()

            buf = BytesIO()
            fig.savefig(buf, format='png', bbox_inches='tight')
            buf.seek(0)
        finally:
            plt.close(fig)

    logger.debug("Rendered %s chart of %d rows", prepared.chart_kind, len(positions))
    return buf
