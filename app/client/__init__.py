"""Caller-side facade that talks to the LLM proxy over HTTP."""

from .service import AIService

__all__ = ["AIService"]
