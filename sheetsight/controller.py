import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from sheetsight.data_utils import Row, Sheet, Workbook
from sheetsight.env_loader import Settings
from sheetsight.errors import NoDataToAnalyze, SheetSightError
from sheetsight.file_loader import load_file
from sheetsight.llm_interface import ask_about_sheet, explain_error
from sheetsight.plot_utils import AxisOptions, ChartSelection, PreparedChart, axis_options, prepare_chart
from sheetsight.sort_utils import SortDirective, next_sort, sort_rows

logger = logging.getLogger(__name__)

TABLE_VIEW = "table"
CHART_VIEW = "chart"
VIEWS = (TABLE_VIEW, CHART_VIEW)


@dataclass
class AppState:
    """Everything the UI shows. Only AppController mutates it."""
    workbook: Optional[Workbook] = None
    active_sheet_index: int = 0
    active_view: str = TABLE_VIEW
    sort: Optional[SortDirective] = None
    chart: ChartSelection = field(default_factory=ChartSelection)
    analysis_response: Optional[str] = None
    error: Optional[str] = None
    is_parsing: bool = False
    is_analyzing: bool = False
    file_id: int = 0      # bumped whenever the loaded data changes
    generation: int = 0   # bumped on every request that supersedes an analysis
    load_generation: int = 0

    @property
    def active_sheet(self) -> Optional[Sheet]:
        if self.workbook is None:
            return None
        return self.workbook[self.active_sheet_index]

    @property
    def file_name(self) -> Optional[str]:
        return self.workbook.file_name if self.workbook else None


@dataclass(frozen=True)
class AnalysisTicket:
    generation: int
    file_id: int
    sheet_index: int
    question: str


@dataclass(frozen=True)
class LoadTicket:
    generation: int
    file_name: str


class AppController:
    def __init__(self, client=None, settings: Settings = None):
        self.state = AppState()
        self.client = client
        self.settings = settings

    # --- file handling ---

    def begin_load(self, file_name: str) -> LoadTicket:
        self.state.error = None
        self.state.is_parsing = True
        # A new upload supersedes any outstanding analysis.
        self.state.is_analyzing = False
        self.state.generation += 1
        self.state.load_generation += 1
        return LoadTicket(self.state.load_generation, file_name)

    def complete_load(self, ticket: LoadTicket, workbook: Workbook) -> bool:
        if ticket.generation != self.state.load_generation:
            logger.info("Discarding superseded load of %s", ticket.file_name)
            return False

        self.state = AppState(
            workbook=workbook,
            file_id=self.state.file_id + 1,
            generation=self.state.generation + 1,
            load_generation=self.state.load_generation,
        )
        logger.info("Active workbook: %s (%s)", workbook.file_name, ", ".join(workbook.sheet_names))
        return True

    def fail_load(self, ticket: LoadTicket, error: SheetSightError) -> bool:
        if ticket.generation != self.state.load_generation:
            return False
        # The previously loaded workbook stays usable.
        self.state.is_parsing = False
        self.state.error = error.user_message
        return True

    def load_file(self, data: bytes, file_name: str) -> bool:
        ticket = self.begin_load(file_name)
        try:
            workbook = load_file(data, file_name)
        except SheetSightError as e:
            self.fail_load(ticket, e)
            return False
        return self.complete_load(ticket, workbook)

    async def load_file_async(self, data: bytes, file_name: str) -> bool:
        ticket = self.begin_load(file_name)
        try:
            workbook = await asyncio.to_thread(load_file, data, file_name)
        except SheetSightError as e:
            self.fail_load(ticket, e)
            return False
        return self.complete_load(ticket, workbook)

    def reset(self):
        self.state = AppState(
            file_id=self.state.file_id + 1,
            generation=self.state.generation + 1,
            load_generation=self.state.load_generation + 1,
        )

    # --- navigation ---

    def switch_sheet(self, index: int):
        workbook = self.state.workbook
        if workbook is None or not 0 <= index < len(workbook):
            raise IndexError(f"No sheet at index {index}")
        if index == self.state.active_sheet_index:
            return
        self.state.active_sheet_index = index
        self.state.active_view = TABLE_VIEW
        self.state.is_analyzing = False
        self.state.sort = None
        self.state.chart = ChartSelection()

    def set_view(self, view: str):
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self.state.active_view = view

    def clear_error(self):
        self.state.error = None

    # --- table ---

    def request_sort(self, column: str) -> SortDirective:
        sheet = self.state.active_sheet
        if sheet is None or column not in sheet.headers:
            raise ValueError(f"Unknown column: {column}")
        self.state.sort = next_sort(self.state.sort, column)
        return self.state.sort

    def sorted_rows(self) -> List[Row]:
        sheet = self.state.active_sheet
        if sheet is None:
            return []
        return sort_rows(sheet.rows, self.state.sort)

    # --- chart ---

    def axis_options(self) -> Optional[AxisOptions]:
        sheet = self.state.active_sheet
        return axis_options(sheet) if sheet else None

    def select_chart(self, chart_kind: str = None, x_column: str = None, y_column: str = None):
        current = self.state.chart
        self.state.chart = replace(
            current,
            chart_kind=chart_kind or current.chart_kind,
            x_column=x_column,
            y_column=y_column,
        )

    def chart_view(self) -> Optional[PreparedChart]:
        sheet = self.state.active_sheet
        if sheet is None:
            return None
        return prepare_chart(sheet, self.state.chart)

    # --- analysis ---

    def begin_analysis(self, question: str) -> Optional[AnalysisTicket]:
        """Start a request; returns None when there is nothing to send."""
        self.state.error = None
        self.state.analysis_response = None

        if self.state.active_sheet is None:
            self.state.error = NoDataToAnalyze().user_message
            return None
        if not question or not question.strip():
            return None

        self.state.generation += 1
        self.state.is_analyzing = True
        return AnalysisTicket(
            generation=self.state.generation,
            file_id=self.state.file_id,
            sheet_index=self.state.active_sheet_index,
            question=question.strip(),
        )

    def is_current(self, ticket: AnalysisTicket) -> bool:
        return (
            ticket.generation == self.state.generation
            and ticket.file_id == self.state.file_id
            and ticket.sheet_index == self.state.active_sheet_index
        )

    def complete_analysis(self, ticket: AnalysisTicket, response: str) -> bool:
        if not self.is_current(ticket):
            logger.info("Discarding stale analysis response for %r", ticket.question)
            return False
        self.state.analysis_response = response
        self.state.is_analyzing = False
        return True

    def fail_analysis(self, ticket: AnalysisTicket, error: Exception) -> bool:
        if not self.is_current(ticket):
            logger.info("Discarding stale analysis failure for %r: %s", ticket.question, error)
            return False
        self.state.error = explain_error(error).user_message
        self.state.is_analyzing = False
        return True

    def _ask(self, sheet: Sheet, question: str) -> str:
        return ask_about_sheet(sheet, question, client=self.client, settings=self.settings)

    def analyze(self, question: str) -> Optional[str]:
        ticket = self.begin_analysis(question)
        if ticket is None:
            return None
        sheet = self.state.active_sheet
        try:
            response = self._ask(sheet, ticket.question)
        except Exception as e:
            self.fail_analysis(ticket, e)
            return None
        return response if self.complete_analysis(ticket, response) else None

    async def analyze_async(self, question: str) -> Optional[str]:
        ticket = self.begin_analysis(question)
        if ticket is None:
            return None
        sheet = self.state.active_sheet
        try:
            response = await asyncio.to_thread(self._ask, sheet, ticket.question)
        except Exception as e:
            self.fail_analysis(ticket, e)
            return None
        return response if self.complete_analysis(ticket, response) else None
