"""Utility helpers: logging setup and debug visualisation."""
