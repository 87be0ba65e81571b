"""Monitoring and display components."""

from .monitor import CycleMonitor

__all__ = ["CycleMonitor"]
