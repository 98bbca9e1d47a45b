"""FastAPI application entry point"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from .config import settings
from .api.routes import catalog_router, signature_router, documents_router
from .api.dependencies import close_clients

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="PDF Multiplier",
    description="Duplicate one PDF per user of the selected Humand segmentations, mark the signature area and upload the copies",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(catalog_router, prefix="/api")
app.include_router(signature_router, prefix="/api")
app.include_router(documents_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "PDF Multiplier API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "humand_configured": bool(settings.humand_api_token),
        "redash_configured": bool(settings.redash_api_key),
    }


@app.on_event("startup")
async def startup_event():
    """Startup tasks"""
    logger.info("Starting PDF Multiplier API")
    if not settings.humand_api_token:
        logger.warning("HUMAND_API_TOKEN is not set - catalog and upload routes will fail")


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown tasks"""
    logger.info("Shutting down PDF Multiplier API")
    await close_clients()


if __name__ == "__main__":
    import uvicorn
    import os
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        "pdf_multiplier.main:app",
        host="0.0.0.0",
        port=port,
    )
