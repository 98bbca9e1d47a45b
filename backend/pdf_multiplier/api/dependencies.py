"""Dependency injection for API routes"""
from ..config import settings
from ..services import (
    DuplicationPipeline,
    DocumentUploader,
    HumandClient,
    NullCache,
    PageRenderer,
    RedashConfig,
    TTLCache,
)


# Process-wide instances, built on first use
_humand_client = None
_duplication_pipeline = None
_page_renderer = None
_document_uploader = None


def build_humand_client() -> HumandClient:
    """Construct a Humand client from settings"""
    cache = TTLCache(settings.cache_ttl) if settings.cache_enabled else NullCache()
    return HumandClient(
        base_url=settings.humand_api_base_url,
        api_token=settings.humand_api_token,
        timeout=settings.api_timeout,
        max_retries=settings.api_max_retries,
        retry_delay=settings.api_retry_delay,
        upload_timeout=settings.upload_timeout,
        cache=cache,
        redash=RedashConfig(
            base_url=settings.redash_api_base_url,
            api_key=settings.redash_api_key,
            folders_query_id=settings.redash_folders_query_id,
            timeout=settings.redash_timeout,
            refresh_wait_time=settings.redash_refresh_wait_time,
        ),
    )


def get_humand_client() -> HumandClient:
    """Get HumandClient singleton"""
    global _humand_client
    if _humand_client is None:
        _humand_client = build_humand_client()
    return _humand_client


def get_duplication_pipeline() -> DuplicationPipeline:
    """Get DuplicationPipeline singleton"""
    global _duplication_pipeline
    if _duplication_pipeline is None:
        _duplication_pipeline = DuplicationPipeline()
    return _duplication_pipeline


def get_page_renderer() -> PageRenderer:
    """Get PageRenderer singleton"""
    global _page_renderer
    if _page_renderer is None:
        _page_renderer = PageRenderer(default_scale=settings.preview_scale)
    return _page_renderer


def get_document_uploader() -> DocumentUploader:
    """Get DocumentUploader singleton"""
    global _document_uploader
    if _document_uploader is None:
        _document_uploader = DocumentUploader(client=get_humand_client())
    return _document_uploader


async def close_clients():
    """Release HTTP connections on shutdown"""
    global _humand_client, _document_uploader
    if _humand_client is not None:
        await _humand_client.aclose()
    _humand_client = None
    _document_uploader = None
