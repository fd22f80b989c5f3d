"""Presentation layer for the Identity bounded context."""

from identity.presentation.routes import router

__all__ = ["router"]
