"""Script to load sample documents into the database.

Existing documents are removed first, so running it twice leaves the same
six rows behind. Ids are fixed so examples and manual checks can refer to them.
"""

import asyncio
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete, insert  # noqa: E402

from docvault.infrastructure.database.models import utcnow  # noqa: E402
from docvault.infrastructure.database.session import create_tables, engine, local_session  # noqa: E402
from docvault.infrastructure.logging import get_logger  # noqa: E402
from docvault.modules.common.constants import ClassificationLevel  # noqa: E402
from docvault.modules.document.models import Document  # noqa: E402

logger = get_logger(__name__)

SAMPLE_DOCUMENTS = [
    {
        "id": uuid.UUID("550e8400-e29b-41d4-a716-446655440001"),
        "title": "Company Handbook",
        "content": (
            "This document contains the company policies and procedures that all employees must follow. "
            "It includes information about work hours, dress code, vacation policies, and code of conduct."
        ),
        "classification": ClassificationLevel.INTERNAL,
        "owner_id": "user-1",
    },
    {
        "id": uuid.UUID("550e8400-e29b-41d4-a716-446655440002"),
        "title": "Public API Documentation",
        "content": (
            "Complete documentation for our public REST API. This includes endpoint descriptions, "
            "request/response examples, authentication methods, and rate limiting information."
        ),
        "classification": ClassificationLevel.PUBLIC,
        "owner_id": "user-2",
    },
    {
        "id": uuid.UUID("550e8400-e29b-41d4-a716-446655440003"),
        "title": "Financial Report Q4 2024",
        "content": (
            "Confidential financial analysis for Q4 2024 including revenue breakdowns, expense reports, "
            "and profit margins. This document contains sensitive financial information."
        ),
        "classification": ClassificationLevel.CONFIDENTIAL,
        "owner_id": "user-1",
    },
    {
        "id": uuid.UUID("550e8400-e29b-41d4-a716-446655440004"),
        "title": "Security Incident Response Plan",
        "content": (
            "Detailed procedures for handling security incidents including contact information for "
            "security team, escalation procedures, and recovery protocols."
        ),
        "classification": ClassificationLevel.SECRET,
        "owner_id": "user-3",
    },
    {
        "id": uuid.UUID("550e8400-e29b-41d4-a716-446655440005"),
        "title": "Meeting Notes - Team Standup",
        "content": (
            "Daily standup meeting notes from the development team. Discussed current sprint progress, "
            "blockers, and upcoming deadlines."
        ),
        "classification": ClassificationLevel.INTERNAL,
        "owner_id": "user-2",
    },
    {
        "id": uuid.UUID("550e8400-e29b-41d4-a716-446655440006"),
        "title": "Open Source License Information",
        "content": (
            "List of all open source libraries used in our projects along with their licenses "
            "and attribution requirements."
        ),
        "classification": ClassificationLevel.PUBLIC,
        "owner_id": "user-1",
    },
]


async def main() -> None:
    """Replace all documents with the sample set."""
    logger.info("Seeding sample documents...")

    try:
        await create_tables()

        now = utcnow()
        rows = [
            {**document, "classification": int(document["classification"]), "created_at": now, "updated_at": now}
            for document in SAMPLE_DOCUMENTS
        ]

        async with local_session() as db:
            await db.execute(delete(Document))
            await db.execute(insert(Document), rows)
            await db.commit()

        logger.info(f"Seeded {len(rows)} documents")
    except Exception as e:
        logger.error(f"Error seeding documents: {str(e)}", exc_info=True)
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
