import colorsys


#BLOCK Color helpers
def wavelength_to_hue(wl: float) -> float:
    """Map a wavelength (nm) onto an HSL hue: red near 650 nm, violet at 350 nm and below."""
    return max(0.0, min(300.0, 650.0 - float(wl))) * 0.96


def hsla(hue: float, alpha: float) -> str:
    return f"hsla({hue:.1f}, 100%, 50%, {alpha})"


def hue_to_rgb(hue: float) -> tuple[float, float, float]:
    # matplotlib does not parse hsla() strings
    return colorsys.hls_to_rgb(hue / 360.0, 0.5, 1.0)


def trace_colors(peak_wl: float) -> tuple[str, str]:
    """Fill and line colors for a component trace whose peak is at `peak_wl`."""
    hue = wavelength_to_hue(peak_wl)
    return hsla(hue, 0.2), hsla(hue, 0.5)
