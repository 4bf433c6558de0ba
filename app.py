import logging

import streamlit as st

from sheetsight import (
    AppController,
    CHART_VIEW,
    SAMPLE_PROMPTS,
    TABLE_VIEW,
    render_chart,
    sheet_to_frame,
)
from sheetsight.env_loader import get_settings, load_environment

logging.basicConfig(level=logging.INFO)
load_environment()


def initialize_session():
    if "controller" not in st.session_state:
        st.session_state.controller = AppController(settings=get_settings())
    if "uploader_key" not in st.session_state:
        st.session_state.uploader_key = 0
    if "last_upload" not in st.session_state:
        st.session_state.last_upload = None


# App config and setup
st.set_page_config(page_title="SheetSight — AI Data Explorer", layout="wide")
st.title("📊 SheetSight — Ask Your Spreadsheet")
initialize_session()

controller: AppController = st.session_state.controller
state = controller.state

# Sidebar upload
with st.sidebar:
    st.header("📂 Upload File")
    uploaded_file = st.file_uploader(
        "Drag and drop a CSV or Excel file here, or click to select a file.",
        type=["csv", "xlsx", "xls"],
        key=f"uploader_{st.session_state.uploader_key}",
    )
    if state.workbook is not None and st.button("Upload New File"):
        controller.reset()
        st.session_state.uploader_key += 1
        st.session_state.last_upload = None
        st.rerun()

# File upload logic: load each uploaded file once
if uploaded_file is not None:
    upload_id = (uploaded_file.name, uploaded_file.size)
    if upload_id != st.session_state.last_upload:
        st.session_state.last_upload = upload_id
        with st.spinner("Processing your file..."):
            if controller.load_file(uploaded_file.getvalue(), uploaded_file.name):
                st.success("✅ Tabular data loaded successfully.")

# loading replaces the state object
state = controller.state

if state.error:
    st.error(f"Error: {state.error}")
    # shown once; the next interaction starts clean
    controller.clear_error()

sheet = state.active_sheet
if sheet is None:
    st.info("Upload your data file to get started.")
    st.stop()

workbook = state.workbook
st.caption(f"Ask anything about your data from **{workbook.file_name}**")

if len(workbook) > 1:
    chosen = st.selectbox(
        "Current Sheet",
        options=list(range(len(workbook))),
        index=state.active_sheet_index,
        format_func=lambda i: workbook[i].label,
    )
    if chosen != state.active_sheet_index:
        controller.switch_sheet(chosen)
        st.rerun()

left, right = st.columns([3, 2])

with left:
    view = st.radio(
        "View",
        options=[TABLE_VIEW, CHART_VIEW],
        index=[TABLE_VIEW, CHART_VIEW].index(state.active_view),
        format_func=lambda v: "Data Preview" if v == TABLE_VIEW else "Visualization",
        horizontal=True,
    )
    if view != state.active_view:
        controller.set_view(view)

    if state.active_view == TABLE_VIEW:
        st.subheader("Data Preview")
        st.markdown(f"Showing all {len(sheet.rows)} records.")
        sort_col, sort_btn = st.columns([3, 1])
        with sort_col:
            sort_column = st.selectbox("Sort by", options=sheet.headers, key=f"sort_{state.file_id}_{state.active_sheet_index}")
        with sort_btn:
            if st.button("Sort ⇅"):
                controller.request_sort(sort_column)
        if state.sort is not None:
            arrow = "▲" if not state.sort.descending else "▼"
            st.caption(f"Sorted by {state.sort.column} {arrow}")
        st.dataframe(sheet_to_frame(sheet, controller.sorted_rows()), use_container_width=True)

    else:
        options = controller.axis_options()
        kind_col, x_col, y_col = st.columns(3)
        with kind_col:
            chart_kind = st.selectbox("Chart Type", options=["bar", "line"],
                                      format_func=lambda k: f"{k.title()} Chart")
        with x_col:
            x_column = st.selectbox("X-Axis", options=[None] + options.all_columns,
                                    format_func=lambda c: "Select column..." if c is None else c)
        with y_col:
            y_column = st.selectbox("Y-Axis (Numerical)", options=[None] + options.numeric_columns,
                                    format_func=lambda c: "Select column..." if c is None else c)
        controller.select_chart(chart_kind, x_column, y_column)

        prepared = controller.chart_view()
        if prepared is None:
            st.info("💡 Please select an X-axis and a Y-axis from the dropdowns above to generate a visualization.")
        else:
            st.image(render_chart(prepared).getvalue(), caption="📊 Chart")

with right:
    st.subheader("AI Analysis")
    question = st.text_area("Your Question", placeholder="e.g., 'What is the total sales amount?'")

    st.caption("Or try a suggestion:")
    suggestion = None
    for i, sample in enumerate(SAMPLE_PROMPTS):
        if st.button(sample, key=f"sample_{i}"):
            suggestion = sample

    submitted = st.button("Generate Insights", type="primary", disabled=not question.strip())
    to_ask = suggestion or (question if submitted else None)

    if to_ask:
        with st.spinner("🤖 Generating insights..."):
            controller.analyze(to_ask)
        st.rerun()

    st.markdown("#### Analysis Result")
    if state.analysis_response:
        st.markdown(state.analysis_response)
    else:
        st.markdown("💡 Your data analysis will appear here.")
