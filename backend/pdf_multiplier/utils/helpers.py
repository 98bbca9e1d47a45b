"""Helper utility functions"""
import math
import re
import unicodedata
from typing import Optional, Union
from ..models.duplication import NamingPattern
from ..models.recipient import Recipient

DEFAULT_IDENTIFIER = "usuario"
UNKNOWN_NAME = "usuario_desconocido"

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')


def sanitize_filename(name: str) -> str:
    """
    Make a filename stem safe for any filesystem and append .pdf

    Unsafe characters become underscores, whitespace runs and repeated
    underscores collapse to one underscore, edge underscores are trimmed
    and the result is lowercased. A stem with nothing left becomes "usuario".
    """
    name = _UNSAFE_CHARS.sub("_", name)
    name = re.sub(r"\s+", "_", name)
    name = re.sub(r"_+", "_", name)
    name = name.strip("_") or DEFAULT_IDENTIFIER
    return f"{name.lower()}.pdf"


def transliterate(text: str) -> str:
    """Strip accents ("María Ñoño" -> "Maria Nono") and keep only ASCII letters, digits and spaces"""
    decomposed = unicodedata.normalize("NFKD", text)
    without_marks = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"[^a-zA-Z0-9\s]", "", without_marks)


def recipient_identifier(recipient: Recipient, pattern: Union[NamingPattern, str]) -> str:
    """Identifier for a recipient according to the naming pattern"""
    pattern = NamingPattern(pattern)
    fallback = recipient.employee_internal_id or recipient.id or DEFAULT_IDENTIFIER

    if pattern == NamingPattern.EMAIL:
        email = recipient.email or ""
        if "@" in email:
            return email.split("@")[0]
        return email or recipient.id or DEFAULT_IDENTIFIER

    if pattern == NamingPattern.FULL_NAME:
        name = transliterate(recipient.full_name).strip()
        if not name:
            return UNKNOWN_NAME
        return re.sub(r"\s+", "_", name).lower()

    # USERNAME and EMPLOYEE_ID both resolve to the internal employee id
    return fallback


def generate_filename(
    recipient: Recipient,
    naming_pattern: Union[NamingPattern, str] = NamingPattern.USERNAME,
    prefix: Optional[str] = None,
) -> str:
    """
    Build the output filename for one recipient

    Args:
        recipient: Target user
        naming_pattern: Which identifier to use
        prefix: Optional prefix joined with an underscore

    Returns:
        Sanitized filename ending in .pdf
    """
    identifier = recipient_identifier(recipient, naming_pattern)
    stem = f"{prefix}_{identifier}" if prefix else identifier
    return sanitize_filename(stem)


def progress_percentage(current: int, total: int) -> int:
    """Completion percentage, halves rounded up"""
    if total <= 0:
        return 0
    return int(math.floor((current / total) * 100 + 0.5))
