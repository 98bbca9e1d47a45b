"""Domain exceptions"""
from enum import Enum
from typing import Optional


class ValidationReason(str, Enum):
    """Why a signature rectangle was rejected"""
    TOO_SMALL = "too_small"
    OUT_OF_BOUNDS = "out_of_bounds"


class PdfMultiplierError(Exception):
    """Base class for all errors raised by this package"""


class SignatureValidationError(PdfMultiplierError):
    """Drawn or stored signature area is geometrically invalid"""

    def __init__(self, reason: ValidationReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class InvalidCaptureState(PdfMultiplierError):
    """Capture operation called from a state that does not allow it"""


class EmptyRecipientList(PdfMultiplierError):
    """A batch was requested with nobody to send it to"""


class DocumentLoadError(PdfMultiplierError):
    """A PDF could not be opened"""


class AnnotationError(PdfMultiplierError):
    """The signature area could not be drawn on a copy"""


class SerializationError(PdfMultiplierError):
    """A PDF copy could not be written to bytes"""


class HumandAPIError(PdfMultiplierError):
    """Request to the Humand API failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
