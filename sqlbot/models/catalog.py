"""
Catalog Models

Typed descriptors for catalogued database tables. Descriptors are written by
the indexer and read by the relevance ranker.
"""

from pydantic import BaseModel, Field, field_validator


class TableDescriptor(BaseModel):
    """Catalogued summary of one database table. Unique by ``name``."""

    name: str = Field(..., min_length=1, description="Table name (uniqueness key)")
    description: str = Field(default="", description="Short human-readable description")
    keywords: list[str] = Field(
        default_factory=list,
        description="Keywords that suggest this table is relevant to a question",
    )
    sample_columns: list[str] = Field(
        default_factory=list,
        description="Column names, in table order",
    )
    relationships: list[str] = Field(
        default_factory=list,
        description="Foreign-key relationships rendered as 'column -> table.column'",
    )

    @field_validator("keywords", "sample_columns", "relationships", mode="before")
    @classmethod
    def coerce_missing_list(cls, v):
        """Treat a missing (NULL) list as empty."""
        if v is None:
            return []
        return v
