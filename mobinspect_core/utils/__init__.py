"""Utility helpers for mobinspect_core."""

from .logging import setup_logging, get_logger, reset_logging

__all__ = ["setup_logging", "get_logger", "reset_logging"]
