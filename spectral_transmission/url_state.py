"""
url_state.py

Shareable selection state: the dye and the ordered filter chain are stored in the
page URL as query parameters, e.g.

    ?dye=EGFP&filters=FF01-525_45:t,Di02-R488:r

Keys that are not among the known sources are dropped when reading a URL back.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from .filter_math import TRANSMISSION, FilterEntry, normalize_mode

DYE_PARAM = "dye"
FILTERS_PARAM = "filters"


def encode_selection(dye: Optional[str], filters: Iterable[FilterEntry]) -> dict[str, str]:
    params = {}
    if dye:
        params[DYE_PARAM] = dye
    chain = ",".join(f"{entry.key}:{entry.mode}" for entry in filters)
    if chain:
        params[FILTERS_PARAM] = chain
    return params


def decode_selection(
    params: Mapping[str, str],
    dyes: Iterable[str],
    filters: Iterable[str],
) -> tuple[Optional[str], list[FilterEntry]]:
    known_dyes, known_filters = set(dyes), set(filters)

    dye = params.get(DYE_PARAM)
    if dye not in known_dyes:
        dye = None

    chain = []
    for item in (params.get(FILTERS_PARAM) or "").split(","):
        item = item.strip()
        key, sep, mode = item.rpartition(":")
        if not sep or key not in known_filters:
            # no mode given, or a ':' that belongs to the key itself
            key, mode = item, TRANSMISSION
        if key not in known_filters:
            continue
        try:
            mode = normalize_mode(mode)
        except ValueError:
            mode = TRANSMISSION
        chain.append(FilterEntry(key, mode))
    return dye, chain
