# sheetsight/__init__.py
# === Tabular Model ===
from .data_utils import (
    Number,
    Text,
    Sheet,
    Workbook,
    coerce_cell,
    sheet_to_frame,
    describe_sheet
)

# === File Handling ===
from .file_loader import load_file, detect_format, FileFormat

# === Sorting ===
from .sort_utils import SortDirective, next_sort, sort_rows

# === Chart Utilities ===
from .plot_utils import (
    ChartSelection,
    axis_options,
    prepare_chart,
    render_chart
)

# === LLM Interaction ===
from .llm_interface import (
    llama_query,
    ask_about_sheet,
    format_prompt,
    explain_error,
    SAMPLE_PROMPTS
)

# === Application State ===
from .controller import AppController, AppState, TABLE_VIEW, CHART_VIEW

# === Errors ===
from .errors import (
    SheetSightError,
    UnsupportedFormat,
    ParseError,
    EmptyDataset,
    AnalysisRequestFailed,
    InvalidCredential,
    NoDataToAnalyze
)
