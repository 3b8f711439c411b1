"""Telemetry and callback protection."""

from .guard import CallbackGuard, GuardStatus, OneShotTrigger

__all__ = ["CallbackGuard", "GuardStatus", "OneShotTrigger"]
