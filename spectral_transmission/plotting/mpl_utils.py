import numpy as np

from spectral_transmission.color import hue_to_rgb, wavelength_to_hue


#matplotlib curve for exports
def add_spectrum_curve_to_matplotlib(ax, spectrum, dash=None, linewidth=1.75, fill_alpha=0.2):
    color = hue_to_rgb(wavelength_to_hue(spectrum.peak_wavelength()))
    y = np.asarray(spectrum.samples) * 100
    line, = ax.plot(
        spectrum.wavelengths, y,
        label=spectrum.name,
        linestyle='-', linewidth=linewidth, color=color
    )
    if dash:
        # odd on/off lists repeat, as in SVG/CSS dash arrays
        line.set_dashes(list(dash) * 2 if len(dash) % 2 else dash)
    if fill_alpha:
        ax.fill_between(spectrum.wavelengths, y, color=color, alpha=fill_alpha)
    return line
