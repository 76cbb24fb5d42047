"""Proxy template utilities."""
