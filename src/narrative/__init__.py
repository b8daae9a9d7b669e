"""Scenario interpreter for branching visual novel scripts."""

__version__ = "0.1.0"
