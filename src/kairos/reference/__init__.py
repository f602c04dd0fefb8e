"""Astronomical helpers for lunisolar calendars and equinox-based holidays."""
