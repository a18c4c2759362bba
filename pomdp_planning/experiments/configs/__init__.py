"""Experiment configurations."""

from .base_config import TigerExperimentConfig

__all__ = ['TigerExperimentConfig']
