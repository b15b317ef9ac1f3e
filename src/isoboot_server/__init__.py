"""Serve an ISO image and an iPXE boot script over HTTP."""

__version__ = "0.1.0"
