"""
Yantra API client.

Thin async client for the Yantra ecosystem knowledge endpoints. Every call
goes through the retry policy and a single-attempt transport that enforces
the configured timeout.
"""

import asyncio
import time
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
import pydantic

from sutra_shared.config import RequestConfig
from sutra_shared.errors import (
    ApiError,
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    SutraException,
    TransientNetworkError,
)
from sutra_shared.logging import get_logger
from sutra_shared.metrics import MetricsCollector, get_metrics_collector
from sutra_shared.retry import RetryConfig, RetryPolicy, is_transient_message

from .models import (
    ApiResponse,
    ConstraintsQuery,
    ConstraintsResponse,
    DecisionGuidesQuery,
    DecisionGuidesResponse,
    DocSearchQuery,
    DocSearchResponse,
    PatternsQuery,
    PatternsResponse,
    ReleasesQuery,
    ReleasesResponse,
    RulesQuery,
    RulesResponse,
)
from ..entitlements.models import EntitlementEnvelope


USER_AGENT = "@mahakalp/salesforce-mcp"

ENTITLEMENT_PATH = "/api/auth/tier"
HEALTH_PATH = "/api/health"
CONSTRAINTS_PATH = "/api/public/ecosystem/constraints"
DOC_SEARCH_PATH = "/api/public/ecosystem/docs/search"
RELEASES_PATH = "/api/public/ecosystem/releases"
RULES_PATH = "/api/public/ecosystem/rules/query"
PATTERNS_PATH = "/api/public/ecosystem/patterns/search"
DECISION_GUIDES_PATH = "/api/public/ecosystem/decision-guides/search"

ResponseT = TypeVar("ResponseT", bound=pydantic.BaseModel)


def _compact(body: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset fields so they are never sent as nulls."""
    return {key: value for key, value in body.items() if value is not None}


class YantraClient:
    """Client for the Yantra ecosystem API."""

    def __init__(self,
                 config: Optional[RequestConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.config = config or RequestConfig()
        self.transport = transport
        self.logger = get_logger("sutra.yantra_client")
        self.metrics = metrics or get_metrics_collector("sutra")
        self.retry_config = RetryConfig(
            max_retries=self.config.max_retries,
            base_delay=self.config.retry_delay
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def _headers(self) -> Dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _send(self, method: str, path: str,
                    params: Optional[Dict[str, str]] = None,
                    body: Optional[Dict[str, Any]] = None,
                    expect_json: bool = True) -> Any:
        """Perform exactly one request, bounded by the configured timeout."""
        url = f"{self.config.base_url}{path}"
        timeout = self.config.timeout
        start_time = time.monotonic()
        outcome = "error"

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await asyncio.wait_for(
                    client.request(method, url, params=params, json=body, headers=self._headers()),
                    timeout=timeout
                )

            if response.is_error:
                outcome = str(response.status_code)
                try:
                    text = response.text
                except Exception:
                    text = ""
                raise ApiError(response.status_code, text, response.reason_phrase)

            outcome = "success"
            if not expect_json:
                return None
            try:
                return response.json()
            except ValueError as e:
                outcome = "invalid"
                raise InvalidResponseError(
                    "Yantra API returned a non-JSON body",
                    details={"path": path, "error": str(e)}
                ) from e

        except asyncio.TimeoutError:
            outcome = "timeout"
            raise RequestTimeoutError(timeout, details={"path": path}) from None
        except httpx.TimeoutException as e:
            outcome = "timeout"
            raise RequestTimeoutError(timeout, details={"path": path}) from e
        except httpx.TransportError as e:
            message = str(e) or type(e).__name__
            if is_transient_message(message):
                outcome = "transient"
                raise TransientNetworkError(message, details={"path": path}) from e
            raise NetworkError(message, details={"path": path}) from e
        finally:
            self.metrics.record_api_request(path, outcome, time.monotonic() - start_time)

    async def _call(self, method: str, path: str,
                    params: Optional[Dict[str, str]] = None,
                    body: Optional[Dict[str, Any]] = None) -> Any:
        """Perform a request through the retry policy."""
        policy = RetryPolicy(
            self.retry_config,
            on_retry=lambda retry, error: self.metrics.record_retry(path),
            name=path
        )
        return await policy.call(self._send, method, path, params, body)

    async def _get(self, path: str, params: Optional[Dict[str, str]], model: Type[ResponseT]) -> ResponseT:
        return self._parse(await self._call("GET", path, params=params), model, path)

    async def _post(self, path: str, body: Dict[str, Any], model: Type[ResponseT]) -> ResponseT:
        return self._parse(await self._call("POST", path, body=_compact(body)), model, path)

    @staticmethod
    def _parse(data: Any, model: Type[ResponseT], path: str) -> ResponseT:
        try:
            if issubclass(model, ApiResponse):
                return model.from_wire(data)
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            raise InvalidResponseError(
                f"Unexpected response shape from {path}",
                details={"path": path, "errors": e.error_count()}
            ) from e

    # -------------------------------------------------------------------------
    # Entitlement and health
    # -------------------------------------------------------------------------

    async def get_entitlement(self) -> EntitlementEnvelope:
        """Fetch the caller's entitlement. Raises on any failure."""
        return await self._get(ENTITLEMENT_PATH, None, EntitlementEnvelope)

    async def health_check(self) -> bool:
        """Single reachability probe. Returns False instead of raising."""
        try:
            await self._send("GET", HEALTH_PATH, expect_json=False)
            return True
        except SutraException as e:
            self.logger.debug("Health check failed", error=e.message)
            return False

    # -------------------------------------------------------------------------
    # Free tier endpoints
    # -------------------------------------------------------------------------

    async def get_constraints(self, params: Optional[ConstraintsQuery] = None, **filters) -> ConstraintsResponse:
        params = params or ConstraintsQuery(**filters)
        query: Dict[str, str] = {}
        if params.release_id:
            query["release_id"] = params.release_id
        if params.constraint_type:
            query["constraint_type"] = params.constraint_type.value
        if params.constraint_ids:
            query["constraint_ids"] = ",".join(params.constraint_ids)
        if params.context:
            query["context"] = params.context
        if params.max_results:
            query["max_results"] = str(params.max_results)

        return await self._get(CONSTRAINTS_PATH, query, ConstraintsResponse)

    async def search_docs(self, params: Optional[DocSearchQuery] = None, **filters) -> DocSearchResponse:
        params = params or DocSearchQuery(**filters)
        return await self._post(DOC_SEARCH_PATH, {
            "query": params.query,
            "release_id": params.release_id,
            "topics": params.topics,
            "max_results": params.max_results,
        }, DocSearchResponse)

    async def get_releases(self, params: Optional[ReleasesQuery] = None, **filters) -> ReleasesResponse:
        params = params or ReleasesQuery(**filters)
        query: Dict[str, str] = {}
        if params.release_id:
            query["release_id"] = params.release_id
        if params.include_archived:
            query["include_archived"] = "true"
        if params.list_all:
            query["list_all"] = "true"

        return await self._get(RELEASES_PATH, query, ReleasesResponse)

    # -------------------------------------------------------------------------
    # Pro tier endpoints
    # -------------------------------------------------------------------------

    async def query_rules(self, params: Optional[RulesQuery] = None, **filters) -> RulesResponse:
        params = params or RulesQuery(**filters)
        return await self._post(RULES_PATH, {
            "query": params.query,
            "category": params.category,
            "severity": params.severity,
            "context": params.context,
            "max_results": params.max_results,
        }, RulesResponse)

    async def search_patterns(self, params: Optional[PatternsQuery] = None, **filters) -> PatternsResponse:
        params = params or PatternsQuery(**filters)
        return await self._post(PATTERNS_PATH, {
            "query": params.query,
            "category": params.category,
            "context": params.context,
            "max_results": params.max_results,
        }, PatternsResponse)

    async def search_decision_guides(self, params: Optional[DecisionGuidesQuery] = None,
                                     **filters) -> DecisionGuidesResponse:
        params = params or DecisionGuidesQuery(**filters)
        return await self._post(DECISION_GUIDES_PATH, {
            "query": params.query,
            "category": params.category,
            "context": params.context,
            "max_results": params.max_results,
        }, DecisionGuidesResponse)
