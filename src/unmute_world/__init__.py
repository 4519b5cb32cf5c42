"""Unmute World: REST API for a rated social publishing platform."""

__version__ = "1.0.0"
