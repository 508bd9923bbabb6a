"""Babel TLV encoding, HTTP API models and message client helpers for mycelium nodes."""

__version__ = "0.1.0"