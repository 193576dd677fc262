"""
Service-level API for twentyone.

This package exposes the table service that request handlers use to run
games for their users.
"""

from twentyone.api.table import BlackjackTable, GameNotFoundError

__all__ = ["BlackjackTable", "GameNotFoundError"]
