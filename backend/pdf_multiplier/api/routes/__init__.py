"""API route modules"""
from .catalog import router as catalog_router
from .signature import router as signature_router
from .documents import router as documents_router

__all__ = ["catalog_router", "signature_router", "documents_router"]
