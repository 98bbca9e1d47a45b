"""Utility functions and helpers"""
from .helpers import (
    sanitize_filename,
    transliterate,
    recipient_identifier,
    generate_filename,
    progress_percentage,
)

__all__ = [
    "sanitize_filename",
    "transliterate",
    "recipient_identifier",
    "generate_filename",
    "progress_percentage",
]
