"""
Generation pipeline services.

    from marketing_toolkit.services import GenerationService, ContentRouter

Submodules stay importable by name (``request_builder``,
``response_extractor``, ``markdown_segmenter``) for their module-level
functions.
"""

from marketing_toolkit.services.request_executor import (
    BackoffRequestExecutor,
    ProviderRequest,
)
from marketing_toolkit.services.content_router import ContentRouter, RouterState
from marketing_toolkit.services.generation_service import GenerationService

__all__ = [
    "BackoffRequestExecutor",
    "ProviderRequest",
    "ContentRouter",
    "RouterState",
    "GenerationService",
]
