"""Provision Azure environments and materialize their settings locally."""

__version__ = "0.1.0"
