"""RESILOC inventory backend.

Communities curate a catalog of proxy, indicator and scenario templates,
instantiate them as community-scoped copies and capture snapshots of
configured proxy values.
"""

from .__version__ import __version__

__all__ = ["__version__"]
