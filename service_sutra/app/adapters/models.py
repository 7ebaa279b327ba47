"""
Request and response models for the Yantra ecosystem API.

Response models type the envelope only and hand back the body as received.
"""

from typing import Any, Dict, List, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ConstraintType(str, Enum):
    """Constraint categories served by Yantra."""
    GOVERNOR_LIMIT = "governor_limit"
    PLATFORM_RULE = "platform_rule"
    BEST_PRACTICE = "best_practice"


class _Request(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class ConstraintsQuery(_Request):
    release_id: Optional[str] = None
    constraint_type: Optional[ConstraintType] = None
    constraint_ids: Optional[List[str]] = None
    context: Optional[str] = None
    max_results: Optional[int] = Field(default=None, gt=0)


class DocSearchQuery(_Request):
    query: str
    release_id: Optional[str] = None
    topics: Optional[List[str]] = None
    max_results: int = Field(default=5, gt=0)


class ReleasesQuery(_Request):
    release_id: Optional[str] = None
    include_archived: Optional[bool] = None
    list_all: Optional[bool] = None


class RulesQuery(_Request):
    query: str
    category: Optional[str] = None
    severity: Optional[str] = None
    context: Optional[str] = None
    max_results: int = Field(default=10, gt=0)


class PatternsQuery(_Request):
    query: str
    category: Optional[str] = None
    context: Optional[str] = None
    max_results: int = Field(default=5, gt=0)


class DecisionGuidesQuery(_Request):
    query: str
    category: Optional[str] = None
    context: Optional[str] = None
    max_results: int = Field(default=5, gt=0)


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------
# Only envelope fields are typed. Items, release references and timings are
# carried as raw JSON values so they reach the caller unchanged.

class ApiResponse(_Payload):
    """Envelope shared by every knowledge endpoint."""
    success: bool
    error: Optional[str] = None
    release: Any = None
    processing_time_ms: Any = None

    _body: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @classmethod
    def from_wire(cls, body: Any):
        """Validate the envelope and keep the body exactly as received."""
        response = cls.model_validate(body)
        response._body = body
        return response

    def to_payload(self) -> Dict[str, Any]:
        """Wire form of the response: the received body, or a dump of the set fields."""
        if self._body is not None:
            return self._body
        return self.model_dump(mode="json", exclude_unset=True)


class ConstraintsResponse(ApiResponse):
    constraints: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class DocSearchResponse(ApiResponse):
    results: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    query: Optional[str] = None


class ReleasesResponse(ApiResponse):
    releases: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class RulesResponse(ApiResponse):
    rules: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class PatternsResponse(ApiResponse):
    patterns: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    query: Optional[str] = None


class DecisionGuidesResponse(ApiResponse):
    guides: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    query: Optional[str] = None
