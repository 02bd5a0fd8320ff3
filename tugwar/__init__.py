"""Tug-of-war match simulation with console reports and a live pygame view."""

__version__ = "0.1.0"
__all__ = ["__version__"]