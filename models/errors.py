# models/errors.py
from __future__ import annotations
from typing import Any, Dict, Optional


class FlightSearchError(Exception):
    """
    Base for every failure a flight search can surface to the user.
    Carries the user-facing message plus optional details and suggestions,
    and knows how to turn itself into the tool's error payload.
    """

    error_type = "flight_search_failed"

    def __init__(self, message: str, details: Optional[str] = None, suggestions: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.suggestions = suggestions

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "errorType": self.error_type}
        if self.details:
            payload["details"] = self.details
        if self.suggestions:
            payload["suggestions"] = self.suggestions
        return payload


class ConfigurationError(FlightSearchError):
    error_type = "configuration_missing"


class ParameterError(FlightSearchError):
    error_type = "parameter_invalid"


class UpstreamError(FlightSearchError):
    pass


class UpstreamRequestError(UpstreamError):
    error_type = "upstream_request_failed"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
        suggestions: Optional[str] = None,
    ):
        super().__init__(message, details=details, suggestions=suggestions)
        self.status_code = status_code


class UpstreamShapeError(UpstreamError):
    error_type = "upstream_shape_invalid"
