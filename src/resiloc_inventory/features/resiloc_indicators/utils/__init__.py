"""Indicator template utilities."""
