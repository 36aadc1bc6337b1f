"""Depth-image pyramid collision checking and quadcopter control components."""

__version__ = "0.1.0"