"""
PrecipMonitor Core Service

Keeps an hour-addressed history of NWS observations for a single airport
and derives rolling and per-day precipitation, temperature and humidity totals.
"""

__version__ = "1.1.0"
