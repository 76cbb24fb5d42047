"""Request models for static proxies."""

from .requests import UpdateStaticProxyRequest

__all__ = ["UpdateStaticProxyRequest"]
