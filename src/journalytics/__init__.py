"""
Journalytics - Trading Journal Analytics

Public API for computing performance and risk statistics from logged trades.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("journalytics")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
