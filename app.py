import streamlit as st

from decay_search.config import (
    DEFAULT_QUERY,
    NO_RESULTS_MESSAGE,
    SOURCE_URL,
    VERIFY_QUERY_MESSAGE,
    WAITING_MESSAGE,
)
from decay_search.database import RadiationType, TransitionTable, TransitionTableError, load_transition_table
from decay_search.export import results_to_csv_bytes, results_to_png_bytes
from decay_search.matcher import search
from decay_search.query import QueryParseError, parse_query
from decay_search.report import PrintMode, format_results

# Signature info for the downloadable image
IMAGE_BUILDER_NAME = "Decay Radiation Search"

st.set_page_config(
    page_title="Decay Radiation Search",
    page_icon="☢️",
    layout="wide",
)

st.title("Decay Radiation Search")

st.markdown(
    """
Enter the energies you observed, **one per line**:
`[definitely|maybe] value unit [uncertainty%]`, e.g. `662 keV 0.5%`.

- Units: `eV`, `keV`, `MeV`. Lines starting with `#` are comments.
- A decay is listed only if it explains **every** entered energy.
- Transitions that match any entered energy are marked with `*`.
"""
)


# --------------------------------------------------------
# REFERENCE TABLE (LOADED ONCE PER PROCESS)
# --------------------------------------------------------
@st.cache_resource
def get_table() -> TransitionTable:
    return load_transition_table()


try:
    table = get_table()
except (FileNotFoundError, TransitionTableError) as e:
    st.error(f"The reference transition table could not be loaded: {e}")
    st.stop()

# --------------------------------------------------------
# SIDEBAR: SEARCH OPTIONS
# --------------------------------------------------------
st.sidebar.header("Search Options")
radiation_label = st.sidebar.radio("Radiation type", ["Gamma", "Alpha"], index=0, key="radiation_type")
radiation_type = RadiationType.GAMMA if radiation_label == "Gamma" else RadiationType.ALPHA

print_label = st.sidebar.radio("Show", ["Everything", "Only matches"], index=0, key="print_mode")
print_mode = PrintMode.EVERYTHING if print_label == "Everything" else PrintMode.ONLY_MATCHES

st.sidebar.info(f"{len(table)} transitions loaded (data version {table.version}).")

# --------------------------------------------------------
# QUERY + RESULTS
# --------------------------------------------------------
query = st.text_area("Query", value=DEFAULT_QUERY, height=160, key="query")
if st.button("Search", type="primary"):
    # Keep the searched text so option changes re-render the same search.
    st.session_state["searched_query"] = query

searched = st.session_state.get("searched_query")
if searched is None:
    st.code(WAITING_MESSAGE, language=None)
    st.stop()

results = None
try:
    energies = parse_query(searched)
except QueryParseError:
    report = VERIFY_QUERY_MESSAGE
else:
    results = search(energies, radiation_type, table)
    report = format_results(results, print_mode) if results else NO_RESULTS_MESSAGE

st.code(report, language=None)

if results:
    st.subheader("Download Results")
    col_csv, col_png = st.columns(2)
    with col_csv:
        st.download_button(
            label="Download results CSV",
            data=results_to_csv_bytes(results),
            file_name="decay_search_results.csv",
            mime="text/csv",
        )
    with col_png:
        st.download_button(
            label="Download results image (PNG)",
            data=results_to_png_bytes(
                results,
                title=f"Matched decays ({radiation_label})",
                signature=f"{IMAGE_BUILDER_NAME} | {SOURCE_URL}",
            ),
            file_name="decay_search_results.png",
            mime="image/png",
        )

st.markdown("---")
st.markdown(f"[Source code]({SOURCE_URL})")
