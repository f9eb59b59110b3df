"""Shared helpers: logging, clock and time utilities."""
