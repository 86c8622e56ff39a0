"""Question bank operations shared by the API and the seed command.

Writes go straight to the repository and then drop the cached category
list; reads of the category list go through the cache.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from app.core.config import SETTINGS
from app.models.question import Question
from app.repos.question_repo import QuestionRepo
from app.services.cache import CacheService, cache_service

logger = logging.getLogger(__name__)

CATEGORIES_CACHE_KEY = "question-bank:categories"


async def list_categories(
    repo: QuestionRepo, cache: CacheService = cache_service
) -> list[str]:
    """Distinct categories, sorted.  Read-through cached."""
    try:
        cached = await cache.get(CATEGORIES_CACHE_KEY)
    except Exception:
        logger.warning("Category cache read failed, querying the store", exc_info=True)
        cached = None
    if cached is not None:
        return json.loads(cached)

    categories = await repo.list_categories()
    try:
        await cache.set(
            CATEGORIES_CACHE_KEY,
            json.dumps(categories),
            SETTINGS.categories_cache_ttl,
        )
    except Exception:
        logger.warning("Category cache write failed", exc_info=True)
    return categories


async def invalidate_categories(cache: CacheService = cache_service) -> None:
    try:
        await cache.delete(CATEGORIES_CACHE_KEY)
    except Exception:
        # The TTL bounds how long the stale list survives.
        logger.warning("Category cache invalidation failed", exc_info=True)


async def add_question(
    repo: QuestionRepo, question: Question, cache: CacheService = cache_service
) -> Question:
    await repo.add(question)
    await invalidate_categories(cache)
    logger.info(
        "Question added id=%s category=%s difficulty=%s",
        question.id,
        question.category,
        question.difficulty,
    )
    return question


async def add_questions(
    repo: QuestionRepo,
    questions: Iterable[Question],
    cache: CacheService = cache_service,
) -> list[Question]:
    batch = list(questions)
    await repo.add_many(batch)
    await invalidate_categories(cache)
    logger.info("Bulk-added %d questions", len(batch))
    return batch


async def update_question(
    repo: QuestionRepo,
    question_id: str,
    changes: dict[str, Any],
    cache: CacheService = cache_service,
) -> Question | None:
    updated = await repo.update(question_id, **changes)
    if updated is not None and "category" in changes:
        await invalidate_categories(cache)
    return updated


async def delete_question(
    repo: QuestionRepo, question_id: str, cache: CacheService = cache_service
) -> bool:
    deleted = await repo.delete(question_id)
    if deleted:
        await invalidate_categories(cache)
        logger.info("Question deleted id=%s", question_id)
    return deleted
