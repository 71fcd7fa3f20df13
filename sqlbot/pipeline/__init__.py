"""
Pipeline Module

Async orchestration of the collaborators:
    - QuestionPipeline: question -> SQL -> verdict -> execution -> reply
    - CatalogIndexer: live schema -> LLM descriptions -> catalog upsert
"""

from sqlbot.pipeline.indexer import CatalogIndexer
from sqlbot.pipeline.question import QuestionPipeline

__all__ = ["CatalogIndexer", "QuestionPipeline"]
