import streamlit as st

from spectral_transmission.filter_math import REFLECTANCE, TRANSMISSION, FilterEntry
from spectral_transmission.url_state import decode_selection, encode_selection

NO_DYE = "None"
MODE_LABELS = {TRANSMISSION: "t", REFLECTANCE: "r"}


def _new_chain_entry(key, mode=TRANSMISSION):
    # ids are never reused, so widget keys stay unique when a filter appears twice
    entry_id = st.session_state.get("next_entry_id", 0)
    st.session_state["next_entry_id"] = entry_id + 1
    st.session_state[f"mode_{entry_id}"] = mode
    return {"id": entry_id, "key": key}


def restore_selection_from_url(dye_keys, filter_keys):
    """Seed the sidebar widgets from the page URL, once per session."""
    if st.session_state.get("url_restored"):
        return
    dye, chain = decode_selection(dict(st.query_params), dye_keys, filter_keys)
    st.session_state["selected_dye"] = dye or NO_DYE
    st.session_state["filter_chain"] = [_new_chain_entry(entry.key, entry.mode) for entry in chain]
    st.session_state["url_restored"] = True


def store_selection_in_url(dye, chain):
    st.query_params.clear()
    st.query_params.update(encode_selection(dye, chain))


#BLOCK: Sidebar UI Components
def ui_sidebar_dye_selection(dye_keys):
    options = [NO_DYE] + list(dye_keys)
    if st.session_state.get("selected_dye") not in options:
        st.session_state["selected_dye"] = NO_DYE
    selected = st.sidebar.selectbox("Dye", options, key="selected_dye")
    return None if selected == NO_DYE else selected


def ui_sidebar_filter_chain(filter_keys):
    """
    Ordered filter chain with a mode per entry. The same filter may be added
    more than once; each copy keeps its own mode.
    """
    entries = [e for e in st.session_state.get("filter_chain", []) if e["key"] in filter_keys]
    st.session_state["filter_chain"] = entries

    add_col, btn_col = st.sidebar.columns([4, 1], vertical_alignment="bottom")
    to_add = add_col.selectbox("Add filter", list(filter_keys), key="filter_to_add")
    if btn_col.button("➕", key="add_filter") and to_add:
        entries.append(_new_chain_entry(to_add))

    chain = []
    if entries:
        with st.sidebar.expander("Filter Chain (t = transmission, r = reflectance)", expanded=True):
            for pos, entry in enumerate(list(entries), start=1):
                mode_col, del_col = st.columns([4, 1], vertical_alignment="bottom")
                mode = mode_col.radio(
                    f"{pos}. {entry['key']}",
                    options=[TRANSMISSION, REFLECTANCE],
                    format_func=MODE_LABELS.get,
                    horizontal=True,
                    key=f"mode_{entry['id']}",
                )
                if del_col.button("✖", key=f"del_{entry['id']}"):
                    entries.remove(entry)
                    st.rerun()
                chain.append(FilterEntry(entry["key"], mode))
    return chain


def display_peak_summary(spectra):
    rows = [
        f"- **{s.name}**: peak at `{s.peak_wavelength():.0f} nm`"
        for s in spectra if s is not None
    ]
    if rows:
        st.markdown("  \n".join(rows))
    else:
        st.info("ℹ️ Select a dye and/or filters to compute the transmitted spectrum.")
