"""Earthquake map: the past day's USGS events on a filterable map."""

__version__ = "1.0.0"
