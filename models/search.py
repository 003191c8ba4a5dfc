# models/search.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from models.flight import FlightOption

DEFAULT_SEARCH_URL = "https://www.google.com/travel/flights"


class TravelClass(str, Enum):
    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"

    @property
    def ordinal(self) -> int:
        # SerpApi: 1 economy, 2 premium economy, 3 business, 4 first
        return list(TravelClass).index(self) + 1


class TripType(IntEnum):
    ROUND_TRIP = 1
    ONE_WAY = 2

    @property
    def label(self) -> str:
        return "round-trip" if self is TripType.ROUND_TRIP else "one-way"


class NormalizationState(str, Enum):
    PARSING = "parsing"
    VALID = "valid"
    DEGRADED = "degraded"
    REJECTED = "rejected"


@dataclass
class SearchRequest:
    origin: str
    destination: str
    departure_date: date
    return_date: Optional[date] = None
    # None means "not given": 1 passenger, and no adults param is sent
    adults: Optional[int] = None
    children: Optional[int] = None
    infants_in_seat: Optional[int] = None
    infants_on_lap: Optional[int] = None
    travel_class: Optional[TravelClass] = None
    origin_label: str = ""
    destination_label: str = ""

    @property
    def trip_type(self) -> TripType:
        return TripType.ROUND_TRIP if self.return_date else TripType.ONE_WAY

    @property
    def passengers(self) -> int:
        return self.adults or 1

    @property
    def travel_class_name(self) -> str:
        return (self.travel_class or TravelClass.ECONOMY).value

    def to_query(self) -> Dict[str, Any]:
        """SerpApi google_flights query params, engine and api_key excluded."""
        params: Dict[str, Any] = {
            "departure_id": self.origin,
            "arrival_id": self.destination,
            "outbound_date": self.departure_date.isoformat(),
        }
        if self.return_date:
            params["return_date"] = self.return_date.isoformat()
        if self.travel_class:
            params["travel_class"] = self.travel_class.ordinal
        if self.adults:
            params["adults"] = self.adults
        if self.children:
            params["children"] = self.children
        if self.infants_in_seat:
            params["infants_in_seat"] = self.infants_in_seat
        if self.infants_on_lap:
            params["infants_on_lap"] = self.infants_on_lap
        params["type"] = int(self.trip_type)
        return params

    def summary(self) -> Dict[str, Any]:
        origin = f"{self.origin_label} ({self.origin})" if self.origin_label else self.origin
        destination = (
            f"{self.destination_label} ({self.destination})" if self.destination_label else self.destination
        )
        return {
            "origin": origin,
            "destination": destination,
            "departureDate": self.departure_date.isoformat(),
            "returnDate": self.return_date.isoformat() if self.return_date else None,
            "passengers": self.passengers,
            "travelClass": self.travel_class_name,
            "tripType": self.trip_type.label,
        }


@dataclass
class PriceInsights:
    lowest_price: Optional[float] = None
    price_level: Optional[str] = None
    typical_price_range: List[float] = field(default_factory=list)
    # SerpApi sends this as a list of objects, a list of pairs, or something else
    price_history: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "lowest_price": self.lowest_price,
                "price_level": self.price_level,
                "typical_price_range": list(self.typical_price_range),
            }
        )
        if self.price_history is not None:
            data["price_history"] = self.price_history
        return data


@dataclass
class SearchResult:
    best_flights: List[FlightOption] = field(default_factory=list)
    other_flights: List[FlightOption] = field(default_factory=list)
    price_insights: Optional[PriceInsights] = None
    search_url: str = DEFAULT_SEARCH_URL
    search_parameters: Dict[str, Any] = field(default_factory=dict)
    state: NormalizationState = NormalizationState.PARSING
    diagnostics: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_results(self) -> int:
        return len(self.best_flights) + len(self.other_flights)

    @property
    def degraded(self) -> bool:
        return self.state is NormalizationState.DEGRADED
