"""
PrecipMonitor API

Publishes the monitor's attributes and exposes its commands over HTTP.
"""

__version__ = "1.1.0"
