"""Holidaze booking client: venue availability, booking calendar and booking mutations."""

__version__ = "0.1.0"
