"""Helpers for running CI workflow jobs locally: expressions, containers, run context and logs."""

__version__ = "0.1.0"