"""
Question Pipeline

Turns one chat question into a reply:
    question -> schema context -> SQL -> verdict -> execution -> formatted reply

Every per-request failure becomes a QuestionOutcome with ``success=False``
and the stage that failed; the pipeline itself does not raise.
"""

import asyncio
import logging
import time

from sqlbot.catalog.store import CatalogStore, CatalogStoreError
from sqlbot.connectors.base import BaseConnector, ConnectorError
from sqlbot.core.ranker import DEFAULT_MAX_TABLES, rank_tables, render_context
from sqlbot.core.validator import SQLValidator
from sqlbot.formatting.telegram import format_error, format_query_result
from sqlbot.llm.base import BaseLLMProvider, LLMError
from sqlbot.llm.parsing import extract_sql
from sqlbot.messaging.base import BaseMessageGateway
from sqlbot.models.catalog import TableDescriptor
from sqlbot.models.query import ErrorStage, IncomingQuestion, QuestionOutcome
from sqlbot.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)

SQL_SYSTEM_PROMPT = "sql_generation.md"
DEFAULT_SCHEMA_PROMPT = "default_schema.md"


class QuestionPipeline:
    """
    Answer natural-language questions with read-only SQL.

    Usage:
        pipeline = QuestionPipeline(llm=provider, connector=connector, catalog=store)
        outcome = await pipeline.process(IncomingQuestion(chat_id=1, question="How many users?"))
        print(outcome.formatted_response)
    """

    def __init__(
        self,
        llm: BaseLLMProvider,
        connector: BaseConnector,
        catalog: CatalogStore | None = None,
        messenger: BaseMessageGateway | None = None,
        prompt_loader: PromptLoader | None = None,
        validator: type[SQLValidator] = SQLValidator,
        max_tables: int = DEFAULT_MAX_TABLES,
    ):
        """
        Initialize pipeline with its collaborators.

        Args:
            llm: Language-model provider used for SQL generation
            connector: Database connector that executes validated SQL
            catalog: Catalog store for relevance ranking (None = default context only)
            messenger: Gateway used for the typing indicator (None = skip)
            prompt_loader: Loader for the system prompt and default schema
            validator: Read-only safety gate
            max_tables: Maximum catalogued tables placed in the prompt
        """
        self.llm = llm
        self.connector = connector
        self.catalog = catalog
        self.messenger = messenger
        self.prompts = prompt_loader or PromptLoader()
        self.validator = validator
        self.max_tables = max_tables

        logger.info(
            "QuestionPipeline initialized",
            extra={
                "provider": llm.provider_name,
                "catalog_enabled": catalog is not None,
                "max_tables": max_tables,
            },
        )

    async def process(self, request: IncomingQuestion) -> QuestionOutcome:
        """Run the full question flow and return its outcome."""
        question = (request.question or "").strip()
        if not question:
            return self._failure("question", "Question cannot be empty")

        start_time = time.time()
        sql: str | None = None
        context_tables: list[str] = []

        try:
            _, catalog = await asyncio.gather(
                self._send_typing(request.chat_id),
                self._load_catalog(),
            )

            ranked = rank_tables(question, catalog, limit=self.max_tables)
            context_tables = [descriptor.name for descriptor in ranked]
            schema_context = self._build_context(ranked)

            text = await self.llm.complete(
                context=schema_context,
                question=question,
                system_prompt=self.prompts.load(SQL_SYSTEM_PROMPT),
            )
            sql = extract_sql(text)
            logger.info(
                f"Generated SQL for chat {request.chat_id}",
                extra={"chat_id": request.chat_id, "sql": sql, "context_tables": context_tables},
            )

            verdict = self.validator.validate(sql)
            if not verdict.is_valid:
                logger.warning(
                    f"Rejected SQL: {verdict.error}",
                    extra={"chat_id": request.chat_id, "error_type": verdict.error_type},
                )
                return self._failure(
                    "validation", verdict.error, sql=sql, context_tables=context_tables
                )

            try:
                result = await self.connector.execute(sql)
            except ConnectorError as e:
                logger.error(f"Query execution failed: {e}", extra={"chat_id": request.chat_id})
                return self._failure(
                    "execution",
                    str(e),
                    sql=sql,
                    context_tables=context_tables,
                    reply=f"Query error: {e}",
                )

            elapsed = (time.time() - start_time) * 1000
            logger.info(
                f"Question answered: {result.row_count} rows in {elapsed:.0f}ms",
                extra={"chat_id": request.chat_id, "row_count": result.row_count},
            )
            return QuestionOutcome(
                success=True,
                formatted_response=format_query_result(result.rows, result.row_count),
                sql=sql,
                rows=result.rows,
                row_count=result.row_count,
                context_tables=context_tables,
            )

        except LLMError as e:
            logger.error(f"SQL generation failed: {e}", extra={"chat_id": request.chat_id})
            return self._failure(
                "llm", str(e), sql=sql, context_tables=context_tables, reply=f"Error: {e}"
            )
        except Exception as e:
            logger.exception(f"Question pipeline failed: {e}")
            return self._failure(
                "internal", str(e), sql=sql, context_tables=context_tables, reply=f"Error: {e}"
            )

    async def _send_typing(self, chat_id: int) -> None:
        if self.messenger is not None:
            await self.messenger.send_typing_action(chat_id)

    async def _load_catalog(self) -> list[TableDescriptor]:
        if self.catalog is None:
            return []
        try:
            return await self.catalog.list_descriptors()
        except (CatalogStoreError, RuntimeError) as e:
            logger.warning(f"Catalog unavailable, using default schema context: {e}")
            return []

    def _build_context(self, ranked: list[TableDescriptor]) -> str:
        if not ranked:
            return self.prompts.load(DEFAULT_SCHEMA_PROMPT)
        return render_context(ranked)

    @staticmethod
    def _failure(
        stage: ErrorStage,
        error: str | None,
        sql: str | None = None,
        context_tables: list[str] | None = None,
        reply: str | None = None,
    ) -> QuestionOutcome:
        message = error or "Unknown error"
        return QuestionOutcome(
            success=False,
            formatted_response=format_error(reply or message),
            sql=sql,
            error=message,
            error_stage=stage,
            context_tables=context_tables or [],
        )
