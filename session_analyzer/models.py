"""
Pydantic models for stored session documents and the HTTP payloads.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from session_analyzer.config import MAX_QUERY_LENGTH


class SessionRatings(BaseModel):
    """Feedback figures recorded for one session."""
    overallAverage: Optional[float] = Field(None, ge=1, le=5, description="Average rating on a 1-5 scale")
    totalResponses: Optional[int] = Field(None, ge=0)
    studentsAttended: Optional[int] = Field(None, ge=0)
    cohortStrength: Optional[int] = Field(None, ge=0)
    percentRated: Optional[float] = Field(None, ge=0, le=100)
    yesResponses: Optional[int] = Field(None, ge=0)
    noResponses: Optional[int] = Field(None, ge=0)
    yesPercent: Optional[float] = Field(None, ge=0, le=100)
    noPercent: Optional[float] = Field(None, ge=0, le=100)


class SessionMetadata(BaseModel):
    """Where the session row was synced from."""
    sourceSheet: Optional[str] = None
    sheetRowNumber: Optional[int] = None
    lastSyncedAt: Optional[datetime] = None


class SessionDocument(BaseModel):
    """
    One document of the ``sessions`` collection.

    The collection is written by the sheet ingestion job; this service only
    reads it. The model documents the shape handed to the query generator
    and validates rating bounds when documents are loaded explicitly.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[Any] = Field(None, alias="_id")
    topicCode: Optional[str] = None
    type: Optional[str] = None
    domain: Optional[str] = Field(None, description="e.g. SRE, Cloud, Backend, Frontend, Data Science")
    class_name: Optional[str] = Field(None, alias="class")
    cohorts: List[str] = Field(default_factory=list)
    instructor: Optional[str] = None
    sessionDate: Optional[datetime] = None
    ratings: SessionRatings = Field(default_factory=SessionRatings)
    metadata: SessionMetadata = Field(default_factory=SessionMetadata)
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class QueryRequest(BaseModel):
    query: str

    @field_validator('query')
    @classmethod
    def validate_query(cls, v):
        if not v or not v.strip():
            raise ValueError('Query is required')

        if len(v) > MAX_QUERY_LENGTH:
            raise ValueError(f'Query too long (max {MAX_QUERY_LENGTH} characters)')

        return v.strip()


class QueryResponse(BaseModel):
    success: bool = True
    query: str
    resultCount: int
    analysis: str
    rawResults: List[Dict[str, Any]] = Field(default_factory=list)
    executionTime: str


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    contextInitialized: bool
    documentCount: int
    timestamp: str
