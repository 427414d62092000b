"""
app.py

Main orchestrator: ties together source discovery, resampling, the filter-chain
combination and plotting into a Streamlit application for checking how much of a
fluorescent dye's emission passes through a set of optical filters.

--- Major Imports & Responsibilities ---
- streamlit
    UI framework, session state, query parameters, download buttons
- spectral_transmission.data_loader (load_source_index, load_spectra_cached)
    Source discovery in data/dyes and data/filters, permissive parsing, concurrent loading
- spectral_transmission.filter_math.combine_transmission
    Dye x filter chain, honouring transmission/reflectance mode per filter
- spectral_transmission.plotting.plotly_utils.create_transmission_plot
    Interactive Plotly figure, traces colored by peak-wavelength hue
- spectral_transmission.exports
    CSV table and PNG report of the active spectra
- spectral_transmission.ui_components
    Sidebar widgets and URL state restore/store
- spectral_transmission.constants.DEFAULT_GRID
    Shared wavelength grid (300-800 nm, 2 nm steps by default)

--- Streamlit Layout ---
1. **Sidebar**: dye selector, ordered filter chain (repeats allowed), per-filter mode, exports, cache rebuild
2. **Main Panel**: spectrum plot and peak-wavelength summary
"""

import streamlit as st

from spectral_transmission.constants import DEFAULT_GRID, TRANSMITTED_KEY
from spectral_transmission.data_loader import load_source_index, load_spectra_cached
from spectral_transmission.exports import generate_report_png, spectra_to_dataframe, to_csv_bytes
from spectral_transmission.filter_math import combine_transmission
from spectral_transmission.log import get_logger
from spectral_transmission.plotting.plotly_utils import create_transmission_plot
from spectral_transmission.ui_components import (
    display_peak_summary,
    restore_selection_from_url,
    store_selection_in_url,
    ui_sidebar_dye_selection,
    ui_sidebar_filter_chain,
)

logger = get_logger(__name__)

st.set_page_config(page_title="Spectral Transmission", layout="wide")


#initialization
dye_sources, filter_sources = load_source_index()
if not dye_sources and not filter_sources:
    st.error("No spectra found. Please add .csv files to data/dyes and data/filters")
    st.stop()


# --- Sidebar ---
st.sidebar.header("Spectral Transmission")
restore_selection_from_url(dye_sources.keys(), filter_sources.keys())

dye = ui_sidebar_dye_selection(dye_sources.keys())
chain = ui_sidebar_filter_chain(filter_sources.keys())
store_selection_in_url(dye, chain)

with st.sidebar.expander("Settings", expanded=False):
    st.caption(
        f"Grid: {DEFAULT_GRID.wlmin:g}–{DEFAULT_GRID.wlmax:g} nm, step {DEFAULT_GRID.wlstep:g} nm"
    )
    if st.button("🔄 Rebuild Spectrum Cache"):
        st.cache_data.clear()
        st.rerun()


# --- Load only what the current selection needs ---
needed = {}
if dye:
    needed[dye] = dye_sources[dye]
for entry in chain:
    needed[entry.key] = filter_sources[entry.key]

# Fresh dict every run; cached spectra are never combined in place
spectra = dict(load_spectra_cached(needed, DEFAULT_GRID.wlmin, DEFAULT_GRID.wlmax, DEFAULT_GRID.wlstep))
dye_spectrum = spectra.get(dye) if dye else None
filter_spectra = [spectra[entry.key] for entry in chain]

# kept out of `spectra` so it never shadows a source
transmitted = combine_transmission(dye, chain, spectra, name=TRANSMITTED_KEY)
if transmitted is not None:
    logger.debug("Recomputed '%s' for dye=%s, %d filter(s)", TRANSMITTED_KEY, dye, len(chain))


# --- Title ---
st.markdown("#### 🔬 Spectral Transmission")


# --- Plot ---
if dye_spectrum is not None or filter_spectra:
    fig = create_transmission_plot(dye_spectrum, filter_spectra, transmitted, DEFAULT_GRID)
    st.plotly_chart(fig, use_container_width=True)

display_peak_summary([dye_spectrum] + filter_spectra + [transmitted])


# — Exports —
if transmitted is not None:
    with st.sidebar.expander("Export", expanded=False):
        table = spectra_to_dataframe([dye_spectrum] + filter_spectra + [transmitted])
        st.download_button(
            label="⬇️ Download CSV",
            data=to_csv_bytes(table),
            file_name="spectral_transmission.csv",
            mime="text/csv",
            use_container_width=True,
        )

        if st.button("📄 Generate Report (PNG)"):
            fname, png = generate_report_png(
                dye_spectrum,
                [(s, entry.mode) for s, entry in zip(filter_spectra, chain)],
                transmitted,
                DEFAULT_GRID,
                output_dir="output",
            )
            st.session_state["last_export"] = {"bytes": png, "name": fname}
            st.success(f"✔️ Report generated: {fname}")

        last_export = st.session_state.get("last_export", {})
        if last_export.get("bytes"):
            st.download_button(
                label="⬇️ Download Last Report",
                data=last_export["bytes"],
                file_name=last_export["name"],
                mime="image/png",
                use_container_width=True,
            )
