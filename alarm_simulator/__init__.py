"""Alarm IoT Simulator - synthetic alarm events for event-driven backends."""

__version__ = "1.0.0"
