"""Utility functions."""

from stasher.utils.history import HistoryStore

__all__ = ["HistoryStore"]
