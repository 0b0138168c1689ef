"""
Configuration for enum accessor synthesis and the database glue.

Callers import the module itself: ``from config import settings``.
"""

from . import settings

__all__ = ["settings"]
