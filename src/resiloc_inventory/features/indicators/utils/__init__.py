"""Indicator instance utilities."""
