"""Xendit invoice payments for a multi-channel order platform."""

__version__ = "0.1.0"
