"""7shifts provider adapter."""

from __future__ import annotations

from .client import SevenShiftsAPIError, SevenShiftsClient

__all__ = ["SevenShiftsAPIError", "SevenShiftsClient"]
