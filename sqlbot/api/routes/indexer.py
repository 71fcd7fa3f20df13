"""
Indexer Routes

Trigger one catalog indexing batch over HTTP.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from sqlbot.models.query import IndexOutcome

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/index", response_model=IndexOutcome)
async def run_index_batch() -> IndexOutcome:
    """
    Describe and catalog the next batch of unindexed tables.

    Call repeatedly until ``remaining`` reaches zero.
    """
    from sqlbot.api.main import get_indexer

    try:
        indexer = get_indexer()
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e

    outcome = await indexer.run()
    logger.info(f"Index batch complete: trained={outcome.trained}, remaining={outcome.remaining}")
    return outcome
