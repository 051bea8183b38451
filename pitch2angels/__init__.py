"""Pitch2Angels application portal: public application flow and admin review API."""

__version__ = "1.0.0"
