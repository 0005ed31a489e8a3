"""Shared model base classes."""

from .base import RnboxBaseModel


__all__ = ["RnboxBaseModel"]
