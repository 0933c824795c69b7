"""Diablock: tick-driven combat simulation engine for an incremental action RPG."""

__version__ = "1.0.0"
