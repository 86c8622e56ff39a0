"""Seed the question bank.

Run with:
    python -m app.seed

Writes to PostgreSQL when DATABASE_URL is set.  Without it the questions
land in a throwaway in-memory repository, which is only useful to check
the seed data loads.
"""

from __future__ import annotations

import asyncio
import logging

from app.core.config import SETTINGS
from app.core.logging import setup_logging
from app.db.engine import async_session_factory, engine
from app.repos.pg_question_repo import PgQuestionRepo
from app.repos.question_repo import InMemoryQuestionRepo
from app.services.seed_data import seed_question_bank

logger = logging.getLogger(__name__)


async def _run() -> int:
    if async_session_factory is None:
        logger.warning("DATABASE_URL not set; seeding an in-memory repository")
        seeded = await seed_question_bank(InMemoryQuestionRepo())
        return len(seeded)

    try:
        async with async_session_factory() as session:
            seeded = await seed_question_bank(PgQuestionRepo(session))
            await session.commit()
    finally:
        if engine is not None:
            await engine.dispose()
    return len(seeded)


def main() -> None:
    setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
    count = asyncio.run(_run())
    print(f"Seeded {count} questions")


if __name__ == "__main__":
    main()
