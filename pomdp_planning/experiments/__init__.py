"""Experiments built on the planning library."""
