"""Example problems."""

from . import Tiger

__all__ = ['Tiger']
