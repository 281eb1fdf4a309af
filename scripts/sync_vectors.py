"""Resync job description vectors into Qdrant from the command line.

Usage (from the repository root):
    python scripts/sync_vectors.py              # all job descriptions
    python scripts/sync_vectors.py --id <uuid>  # a single one

Prerequisites:
    - DB is running and migrated (alembic upgrade head)
    - Qdrant is reachable at QDRANT_URL
"""
import argparse
import asyncio
import sys
import uuid
from pathlib import Path

# Windows: asyncpg requires SelectorEventLoop
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Allow imports from app/
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database import async_session_factory, engine
from app.integrations.ai.embeddings import embedding_service
from app.integrations.vector.registry import register_vector_features
from app.services.insights_service import InsightsService


async def main(job_description_id: uuid.UUID | None) -> int:
    features = register_vector_features()
    if not features.is_available():
        print(f"ERROR: vector features unavailable, missing: {', '.join(features.missing)}")
        return 1

    insights = InsightsService(features, embedding_service)
    try:
        async with async_session_factory() as session:
            if job_description_id is not None:
                count = await insights.sync_one(session, job_description_id)
                print(f"Synced job description {job_description_id} ({count} chunks)")
                return 0

            result = await insights.sync_all(session)
            print(f"Synced {result.synced} job descriptions, {result.failed} failed")
            for error in result.errors:
                print(f"  - {error}")
            return 1 if result.failed else 0
    finally:
        await features.close()
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--id", type=uuid.UUID, default=None, help="sync a single job description")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.id)))
