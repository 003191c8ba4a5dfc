# models/flight.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Airport:
    name: str = ""
    code: str = ""
    # local time as sent by SerpApi, e.g. "2025-12-14 08:05"
    time: str = ""

    def is_identifiable(self) -> bool:
        return bool(self.name or self.code)

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "id": self.code, "time": self.time}


@dataclass
class CarbonEmissions:
    this_flight: Optional[float] = None
    typical_for_this_route: Optional[float] = None
    difference_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "this_flight": self.this_flight,
            "typical_for_this_route": self.typical_for_this_route,
            "difference_percent": self.difference_percent,
        }


@dataclass
class FlightSegment:
    """One takeoff-to-landing leg."""

    departure_airport: Optional[Airport] = None
    arrival_airport: Optional[Airport] = None
    duration: Optional[int] = None
    airline: Optional[str] = None
    airline_logo: Optional[str] = None
    flight_number: Optional[str] = None
    travel_class: Optional[str] = None
    airplane: Optional[str] = None
    legroom: Optional[str] = None
    extensions: List[str] = field(default_factory=list)
    often_delayed_by_over: Optional[str] = None
    overnight: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def is_identifiable(self) -> bool:
        for airport in (self.departure_airport, self.arrival_airport):
            if airport is not None and airport.is_identifiable():
                return True
        return bool(self.airline)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "departure_airport": self.departure_airport.to_dict() if self.departure_airport else None,
                "arrival_airport": self.arrival_airport.to_dict() if self.arrival_airport else None,
                "duration": self.duration,
                "airline": self.airline,
                "airline_logo": self.airline_logo,
                "flight_number": self.flight_number,
                "travel_class": self.travel_class,
                "airplane": self.airplane,
                "legroom": self.legroom,
                "extensions": list(self.extensions),
                "often_delayed_by_over": self.often_delayed_by_over,
                "overnight": self.overnight,
            }
        )
        return data


@dataclass
class FlightOption:
    """
    A bookable itinerary: one or more segments and a single price.
    Options that came in the legacy flat shape hold exactly one segment.
    """

    segments: List[FlightSegment] = field(default_factory=list)
    price: Optional[float] = None
    total_duration: Optional[int] = None
    trip_type: Optional[str] = None
    airline_logo: Optional[str] = None
    carbon_emissions: Optional[CarbonEmissions] = None
    departure_token: Optional[str] = None
    legacy: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def first_segment(self) -> Optional[FlightSegment]:
        return self.segments[0] if self.segments else None

    @property
    def last_segment(self) -> Optional[FlightSegment]:
        return self.segments[-1] if self.segments else None

    @property
    def departure(self) -> Optional[Airport]:
        return self.first_segment.departure_airport if self.segments else None

    @property
    def arrival(self) -> Optional[Airport]:
        return self.last_segment.arrival_airport if self.segments else None

    @property
    def airline(self) -> Optional[str]:
        return self.first_segment.airline if self.segments else None

    @property
    def stops(self) -> int:
        return max(0, len(self.segments) - 1)

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.total_duration is not None:
            return self.total_duration
        known = [s.duration for s in self.segments if s.duration is not None]
        return sum(known) if known else None

    def is_identifiable(self) -> bool:
        first = self.first_segment
        return first is not None and first.is_identifiable()

    def to_dict(self) -> Dict[str, Any]:
        first = self.first_segment
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "flights": [s.to_dict() for s in self.segments],
                "price": self.price,
                "total_duration": self.duration_minutes,
                "type": self.trip_type,
                "airline_logo": self.airline_logo or (first.airline_logo if first else None),
                "carbon_emissions": self.carbon_emissions.to_dict() if self.carbon_emissions else None,
                "departure_token": self.departure_token,
                "departure_airport": self.departure.to_dict() if self.departure else None,
                "arrival_airport": self.arrival.to_dict() if self.arrival else None,
                "airline": self.airline,
                "flight_number": first.flight_number if first else None,
                "stops": self.stops,
            }
        )
        return data
