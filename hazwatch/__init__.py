"""Natural hazard watching: earthquakes, fires and EONET events near home, with phone alerts."""

__version__ = "0.1.0"