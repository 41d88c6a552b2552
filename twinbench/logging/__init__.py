"""Logging configuration for twinbench."""
