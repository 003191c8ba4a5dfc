# agents/flight_search_agent.py
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from agents.search_params_agent import SearchParamsAgent
from clients.serpapi_client import SerpApiClient
from config import Settings, settings as default_settings
from models.errors import FlightSearchError
from models.search import SearchRequest, SearchResult
from models.usage import UsageCounter

logger = logging.getLogger(__name__)

BEST_FLIGHTS_SHOWN = 3
OTHER_FLIGHTS_SHOWN = 5

# camelCase tool argument -> run() keyword
TOOL_ARGUMENTS = {
    "origin": "origin",
    "destination": "destination",
    "departureDate": "departure_date",
    "returnDate": "return_date",
    "passengers": "passengers",
    "travelClass": "travel_class",
    "children": "children",
    "infantsInSeat": "infants_in_seat",
    "infantsOnLap": "infants_on_lap",
}


class FlightSearchAgent:
    """
    The searchFlights tool. Always answers with a dict:
    a success payload, or {"error", "errorType", "details"?, "suggestions"?}.
    FlightSearchError never leaves run().
    """

    def __init__(
        self,
        client: Optional[SerpApiClient] = None,
        params_agent: Optional[SearchParamsAgent] = None,
        usage: Optional[UsageCounter] = None,
        settings: Settings = default_settings,
    ):
        self.client = client or SerpApiClient(settings=settings)
        self.params_agent = params_agent or SearchParamsAgent(api_key=self.client.api_key, settings=settings)
        self.usage = usage

    def run(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: Optional[str] = None,
        passengers: Any = None,
        travel_class: Optional[str] = None,
        children: Any = None,
        infants_in_seat: Any = None,
        infants_on_lap: Any = None,
    ) -> Dict[str, Any]:
        try:
            request = self.params_agent.build(
                origin=origin,
                destination=destination,
                departure_date=departure_date,
                return_date=return_date,
                passengers=passengers,
                travel_class=travel_class,
                children=children,
                infants_in_seat=infants_in_seat,
                infants_on_lap=infants_on_lap,
            )
            logger.info(
                "Searching flights: %s -> %s on %s", request.origin, request.destination, request.departure_date
            )
            result = self.client.search_flights(request)
        except FlightSearchError as e:
            logger.warning("Flight search error (%s): %s", e.error_type, e.message)
            return e.to_payload()

        if self.usage is not None:
            self.usage.increment()
        return self._success(request, result)

    def run_tool(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Entry point for tool calls that use camelCase argument names."""
        kwargs = {TOOL_ARGUMENTS[k]: v for k, v in (arguments or {}).items() if k in TOOL_ARGUMENTS}
        unknown = sorted(set(arguments or {}) - set(TOOL_ARGUMENTS))
        if unknown:
            logger.debug("Ignoring unknown tool arguments: %s", unknown)
        return self.run(
            origin=kwargs.pop("origin", "") or "",
            destination=kwargs.pop("destination", "") or "",
            departure_date=kwargs.pop("departure_date", "") or "",
            **kwargs,
        )

    def _success(self, request: SearchRequest, result: SearchResult) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": True,
            "searchParameters": request.summary(),
            "bestFlights": [f.to_dict() for f in result.best_flights[:BEST_FLIGHTS_SHOWN]],
            "otherFlights": [f.to_dict() for f in result.other_flights[:OTHER_FLIGHTS_SHOWN]],
            "totalResults": result.total_results,
            "searchUrl": result.search_url,
            "resultQuality": result.state.value,
        }
        if result.price_insights is not None:
            payload["priceInsights"] = result.price_insights.to_dict()
        if result.degraded:
            payload["diagnostics"] = list(result.diagnostics)
        return payload
