from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..interfaces.api import router as api_router

settings = get_settings()

app = create_application(
    router=api_router,
    settings=settings,
    summary="REST API for classified documents",
    description="""
    # DocVault API

    Manage documents labelled PUBLIC, INTERNAL, CONFIDENTIAL or SECRET.

    ## Features

    - CRUD operations for documents, with soft deletion
    - Filtering by owner and classification
    - Case-insensitive search over titles and content
    - Paginated listings and per-classification statistics
    """,
)
