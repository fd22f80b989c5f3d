"""Presentation layer for the Entries bounded context."""

from entries.presentation.routes import router

__all__ = ["router"]
