"""Utility functions."""

from .env import resolve_log_level, setup_logging

__all__ = ['setup_logging', 'resolve_log_level']
