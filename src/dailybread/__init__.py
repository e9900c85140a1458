"""Offline-first Bible content cache and guest journal toolkit."""

__version__ = "0.1.0"
