"""
Database models for the shortlink service.

Mapping is the only persistent entity.
"""

from .mapping import Mapping

__all__ = ["Mapping"]
