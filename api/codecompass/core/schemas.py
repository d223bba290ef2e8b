"""
Pydantic schemas for request/response validation and data models.

This module defines the data structures used throughout the application
for type safety and API documentation. Schemas include:
- Search result payloads, tagged by the kind of indexed data
- Search results and the outcome of a refinement run
- Search request and response models for the HTTP API
"""

import logging
from typing import Any, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repository_path: Optional[str] = Field(default=None, alias="repositoryPath")


class FileChunkPayload(_Payload):
    """A chunk of a source file."""

    data_type: Literal["file_chunk"] = Field(default="file_chunk", alias="dataType")
    filepath: str
    # Older indexes stored the chunk text under "content"
    file_content_chunk: str = Field(
        default="",
        validation_alias=AliasChoices("file_content_chunk", "content"),
    )
    chunk_index: int = 0
    total_chunks: int = 1
    last_modified: Optional[str] = None


class CommitInfoPayload(_Payload):
    """Metadata of a single commit."""

    data_type: Literal["commit_info"] = Field(default="commit_info", alias="dataType")
    commit_oid: str
    commit_message: str = ""
    commit_author_name: Optional[str] = None
    commit_author_email: Optional[str] = None
    commit_date: Optional[str] = None
    changed_files_summary: List[str] = Field(default_factory=list)
    parent_oids: List[str] = Field(default_factory=list)


class DiffChunkPayload(_Payload):
    """A chunk of the diff a commit applied to one file."""

    data_type: Literal["diff_chunk"] = Field(default="diff_chunk", alias="dataType")
    commit_oid: str
    filepath: str
    change_type: Optional[str] = None
    diff_content_chunk: str = ""
    chunk_index: int = 0
    total_chunks: int = 1


ResultPayload = Union[FileChunkPayload, CommitInfoPayload, DiffChunkPayload]

_payload_adapter: TypeAdapter = TypeAdapter(ResultPayload)


def parse_payload(raw: Optional[dict]) -> Optional[ResultPayload]:
    """
    Parse a raw Qdrant payload into its tagged payload model.

    Args:
        raw: Payload dict as stored in the collection

    Returns:
        The matching payload model, or None if the payload is missing or
        matches no known result kind
    """
    if not raw:
        return None
    try:
        return _payload_adapter.validate_python(raw)
    except ValidationError as e:
        logger.warning(
            f"Unrecognized payload (dataType={raw.get('dataType')!r}): "
            f"{e.error_count()} validation errors"
        )
        return None


def payload_text(payload: Optional[ResultPayload]) -> str:
    """Return the text-bearing field of a payload, or "" if it has none."""
    if isinstance(payload, FileChunkPayload):
        return payload.file_content_chunk
    if isinstance(payload, CommitInfoPayload):
        return payload.commit_message
    if isinstance(payload, DiffChunkPayload):
        return payload.diff_content_chunk
    return ""


def payload_filepath(payload: Optional[ResultPayload]) -> Optional[str]:
    """Return the file location carried by a payload, if its kind has one."""
    if isinstance(payload, (FileChunkPayload, DiffChunkPayload)):
        return payload.filepath or None
    return None


class SearchResult(BaseModel):
    """
    A single scored hit returned by the vector search backend.

    Attributes:
        id: Point ID in the collection
        score: Similarity score in [0, 1]; None when the backend sent none
        payload: Parsed payload, None when absent or unrecognized
    """

    id: Union[str, int]
    score: Optional[float] = None
    payload: Optional[ResultPayload] = None

    @classmethod
    def from_scored_point(cls, point: Any) -> "SearchResult":
        """Build a SearchResult from a qdrant-client ScoredPoint."""
        return cls(
            id=point.id,
            score=point.score,
            payload=parse_payload(point.payload),
        )


class RefinementResult(BaseModel):
    """Outcome of one refinement run: the latest results and the query that produced them."""

    results: List[SearchResult]
    refined_query: str
    relevance_score: float


class SearchRequest(BaseModel):
    """Body of a POST /search request."""

    query: str = Field(min_length=1)
    filepaths: List[str] = Field(default_factory=list)
    limit: Optional[int] = Field(default=None, ge=1)
    max_refinements: Optional[int] = Field(default=None, ge=0)
    relevance_threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)


SearchResponse = RefinementResult
