# agents/search_params_agent.py
from __future__ import annotations
from datetime import date
from typing import Any, Optional

from config import Settings, has_valid_key, settings as default_settings
from models.errors import ConfigurationError, ParameterError
from models.search import SearchRequest, TravelClass
from utils.airport_codes import find_airport_code
from utils.date_parser import validate_date

DATE_SUGGESTION = "The date must be in the format YYYY-MM-DD and cannot be in the past."


class SearchParamsAgent:
    """
    Validates raw tool arguments into a SearchRequest.
    Nothing is corrected silently: bad airports, dates, counts or classes
    raise ParameterError, and a missing SerpApi key raises ConfigurationError
    with setup steps for the detected search.
    """

    def __init__(self, api_key: Optional[str] = None, settings: Settings = default_settings):
        self.api_key = api_key if api_key is not None else settings.serpapi_key

    def build(
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
        today: Optional[date] = None,
    ) -> SearchRequest:
        origin_code = find_airport_code(origin)
        if not origin_code:
            raise ParameterError(
                f'Could not find airport for "{origin}". Please provide a valid city name or 3-letter airport code.',
                suggestions='Try cities like "New York", "Los Angeles", or airport codes like "JFK", "LAX".',
            )

        destination_code = find_airport_code(destination)
        if not destination_code:
            raise ParameterError(
                f'Could not find airport for "{destination}". Please provide a valid city name or 3-letter airport code.',
                suggestions='Try cities like "London", "Tokyo", or airport codes like "LHR", "NRT".',
            )

        outbound = validate_date(departure_date, today=today)
        if not outbound:
            raise ParameterError(
                f'Invalid departure date "{departure_date}". Please provide a future date in YYYY-MM-DD format.',
                suggestions=DATE_SUGGESTION,
            )

        inbound = None
        if return_date:
            inbound = validate_date(return_date, today=today)
            if not inbound:
                raise ParameterError(
                    f'Invalid return date "{return_date}". Please provide a future date in YYYY-MM-DD format.',
                    suggestions=DATE_SUGGESTION,
                )
            if inbound <= outbound:
                raise ParameterError(
                    f'Return date "{return_date}" must be after departure date "{departure_date}".',
                    suggestions="Make sure your return date is later than your departure date.",
                )

        request = SearchRequest(
            origin=origin_code,
            destination=destination_code,
            departure_date=outbound,
            return_date=inbound,
            adults=self._count(passengers, "passengers"),
            children=self._count(children, "children"),
            infants_in_seat=self._count(infants_in_seat, "infants in seat"),
            infants_on_lap=self._count(infants_on_lap, "infants on lap"),
            travel_class=self._travel_class(travel_class),
            origin_label=str(origin).strip(),
            destination_label=str(destination).strip(),
        )

        if not has_valid_key(self.api_key):
            raise self._not_configured(request)
        return request

    def _count(self, value: Any, label: str) -> Optional[int]:
        """None/0 -> None (param left out); anything else must be a positive whole number."""
        if value is None or value == "" or value == 0:
            return None
        if isinstance(value, bool):
            number = None
        elif isinstance(value, int):
            number = value
        elif isinstance(value, float) and value.is_integer():
            number = int(value)
        elif isinstance(value, str) and value.strip().isdigit():
            number = int(value.strip())
        else:
            number = None

        if number is None or number < 0:
            raise ParameterError(
                f'Invalid number of {label} "{value}".',
                suggestions=f"The number of {label} must be a whole number such as 1, 2 or 3.",
            )
        return number or None

    def _travel_class(self, value: Optional[str]) -> Optional[TravelClass]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, TravelClass):
            return value
        key = str(value).strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return TravelClass(key)
        except ValueError:
            raise ParameterError(
                f'Unknown travel class "{value}".',
                suggestions="Use one of: economy, premium_economy, business, first.",
            ) from None

    def _not_configured(self, request: SearchRequest) -> ConfigurationError:
        summary = request.summary()
        dates = summary["departureDate"]
        if summary["returnDate"]:
            dates += f" - {summary['returnDate']}"
        guide = "\n".join(
            [
                "Setup Instructions:",
                "1. Create a .env file in the project root",
                "2. Add: SERPAPI_KEY=your_actual_api_key_here",
                "3. Get your free API key from https://serpapi.com/dashboard",
                "4. Free tier includes 100 searches per month",
                "",
                "Search parameters detected:",
                f"- Route: {summary['origin']} -> {summary['destination']}",
                f"- Date: {dates}",
                f"- Passengers: {summary['passengers']} {summary['travelClass']}",
                f"- Trip Type: {summary['tripType']}",
                "",
                "Once configured, real flights with pricing can be searched.",
            ]
        )
        return ConfigurationError(
            "Flight search is not configured. SerpApi API key is missing.",
            details="Please set SERPAPI_KEY in your .env file",
            suggestions=guide,
        )
