# clients/serpapi_client.py
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import requests

from clients.response_normalizer import ResponseNormalizer
from config import Settings, has_valid_key, redact, settings as default_settings
from models.errors import ConfigurationError, UpstreamRequestError, UpstreamShapeError
from models.search import NormalizationState, SearchRequest, SearchResult

logger = logging.getLogger(__name__)

USER_AGENT = "FlightSearchAgent/1.0"


class SerpApiClient:
    """
    One GET per search against SerpApi. No retries, no pagination:
    any transport failure or non-2xx status ends the search.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        settings: Settings = default_settings,
    ):
        self.api_key = api_key if api_key is not None else settings.serpapi_key
        self.base_url = base_url or settings.serpapi_url
        self.timeout = timeout or settings.request_timeout
        self.normalizer = normalizer or ResponseNormalizer()

    def enabled(self) -> bool:
        return has_valid_key(self.api_key)

    def get(self, engine: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.enabled():
            raise ConfigurationError(
                "Flight search is not configured properly.",
                details="SerpApi API key is missing or invalid",
                suggestions="The administrator needs to set up the SERPAPI_KEY environment variable.",
            )

        full = dict(params)
        full["engine"] = engine
        full["api_key"] = self.api_key
        logger.info("SerpApi request: engine=%s params=%s key=%s", engine, params, redact(self.api_key))

        try:
            res = requests.get(
                self.base_url,
                params=full,
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("SerpApi transport error: %s", e)
            raise UpstreamRequestError(
                "Sorry, the flight search service could not be reached. Please try again.",
                details=str(e),
                suggestions="Check your internet connection and try again in a moment.",
            ) from e

        if not res.ok:
            body = (res.text or "")[:500]
            logger.error("SerpApi error response: %s %s %s", res.status_code, res.reason, body)
            raise self._status_error(res.status_code, res.reason, body)

        try:
            data = res.json()
        except ValueError as e:
            logger.error("SerpApi returned a non-JSON body: %s", (res.text or "")[:200])
            raise UpstreamShapeError(
                "Flight search failed: SerpApi returned an unreadable response.",
                details=str(e),
                suggestions="Please try again in a moment.",
            ) from e

        if isinstance(data, dict) and isinstance(data.get("error"), str):
            logger.error("SerpApi reported an error: %s", data["error"])
            raise UpstreamRequestError(
                "Flight search failed: SerpApi could not complete the search.",
                status_code=res.status_code,
                details=data["error"],
                suggestions="Try searching with different cities or dates.",
            )
        return data

    def search_flights(self, request: SearchRequest) -> SearchResult:
        raw = self.get("google_flights", request.to_query())
        if isinstance(raw, dict):
            logger.debug(
                "SerpApi raw response: best=%d other=%d price_insights=%s",
                _list_len(raw.get("best_flights")),
                _list_len(raw.get("other_flights")),
                bool(raw.get("price_insights")),
            )

        outcome = self.normalizer.normalize(raw)
        if outcome.state is NormalizationState.REJECTED:
            raise outcome.error or UpstreamShapeError("Flight search failed: unreadable flight data.")
        if outcome.state is NormalizationState.DEGRADED:
            logger.warning("Serving degraded flight results: %s", outcome.diagnostics)
        return outcome.result

    def _status_error(self, status_code: int, reason: str, body: str) -> UpstreamRequestError:
        details = f"SerpApi request failed: {status_code} {reason}. Response: {body}"
        if status_code == 400:
            return UpstreamRequestError(
                "Invalid flight search parameters. Please check your search criteria.",
                status_code=status_code,
                details=details,
                suggestions="Try searching with different cities, valid dates (YYYY-MM-DD format), or check airport codes.",
            )
        if status_code in (401, 403):
            return UpstreamRequestError(
                "Flight search is not configured properly. SerpApi rejected the API key.",
                status_code=status_code,
                details=details,
                suggestions="Check that SERPAPI_KEY is correct at https://serpapi.com/dashboard.",
            )
        if status_code == 429:
            return UpstreamRequestError(
                "The flight search quota has been used up.",
                status_code=status_code,
                details=details,
                suggestions="Wait for the monthly quota to reset or upgrade the SerpApi plan.",
            )
        return UpstreamRequestError(
            "Sorry, I encountered an error while searching for flights. Please try again.",
            status_code=status_code,
            details=details,
            suggestions="Please try again in a moment or check your search parameters.",
        )


def _list_len(value: Any) -> int:
    return len(value) if isinstance(value, list) else 0
