"""Provider matching, pricing, and booking lifecycle core for the CleanConnect marketplace."""

__version__ = "0.1.0"
