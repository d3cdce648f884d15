"""Restructure long plain-text documents into paragraphs and titled sections."""

__version__ = "0.1.0"
