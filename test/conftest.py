from __future__ import annotations
from datetime import date, timedelta
from unittest.mock import Mock

import pytest

API_KEY = "test-serpapi-key-1234567890"


def nested_flight(airline="Japan Airlines", price=1234, legs=("JFK", "NRT")):
    segments = []
    for i, (dep, arr) in enumerate(zip(legs, legs[1:])):
        segments.append(
            {
                "departure_airport": {"name": f"{dep} Airport", "id": dep, "time": f"2026-12-25 0{8 + i}:05"},
                "arrival_airport": {"name": f"{arr} Airport", "id": arr, "time": f"2026-12-26 1{2 + i}:40"},
                "duration": 400,
                "airline": airline,
                "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/JL.png",
                "flight_number": f"JL {5 + i}",
                "travel_class": "Economy",
                "legroom": "31 in",
                "extensions": ["Wi-Fi for a fee"],
                "plane_and_crew_by": "Operated by partner",
            }
        )
    return {
        "flights": segments,
        "layovers": [{"id": legs[1], "duration": 90}] if len(legs) > 2 else [],
        "total_duration": 400 * len(segments),
        "carbon_emissions": {"this_flight": 812000, "typical_for_this_route": 790000, "difference_percent": 3},
        "price": price,
        "type": "One way",
        "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/JL.png",
        "departure_token": "WyJDalJJ",
    }


def legacy_flight(airline="Delta", price=899):
    return {
        "departure_airport": {"name": "John F. Kennedy International Airport", "id": "JFK", "time": "2026-12-25 10:00"},
        "arrival_airport": {"name": "Narita International Airport", "id": "NRT", "time": "2026-12-26 14:00"},
        "duration": 840,
        "airline": airline,
        "flight_number": "DL 181",
        "travel_class": "Economy",
        "price": price,
    }


def empty_flight(price=10):
    return {"price": price, "total_duration": 300, "type": "One way"}


@pytest.fixture
def future_day():
    return date.today() + timedelta(days=60)


@pytest.fixture
def raw_response():
    return {
        "search_metadata": {
            "id": "abc123",
            "status": "Success",
            "google_flights_url": "https://www.google.com/travel/flights?hl=en&tfs=abc",
            "total_time_taken": 1.7,
        },
        "search_parameters": {
            "engine": "google_flights",
            "departure_id": "JFK",
            "arrival_id": "NRT",
            "outbound_date": "2026-12-25",
            "travel_class": 1,
            "adults": 1,
        },
        "best_flights": [nested_flight(), empty_flight(), nested_flight("ANA", 1500, ("JFK", "ORD", "NRT"))],
        "other_flights": [legacy_flight(), empty_flight(), nested_flight("United", 990)],
        "price_insights": {
            "lowest_price": 899,
            "price_level": "typical",
            "typical_price_range": [850, 1400],
            "price_history": [[1735689600, 1020], [1735776000, 1010]],
        },
        "airports": [{"departure": [], "arrival": []}],
    }


@pytest.fixture
def broken_response():
    """Fails the strict schema: prices as strings, a non-object entry, partial legs."""
    best = []
    for i in range(7):
        flight = nested_flight(price=1000 + i)
        flight["price"] = f"${1000 + i:,}"
        best.append(flight)
    return {
        "search_metadata": {"google_flights_url": "https://www.google.com/travel/flights?tfs=xyz"},
        "best_flights": best,
        "other_flights": [
            "not a flight",
            {"flights": [{"airline": "Partial Air", "duration": "95"}], "price": "450", "booking_hint": "x"},
            {"airline": "Flat Air", "departure_airport": {"id": "JFK"}, "price": 300},
            empty_flight(),
        ],
        "price_insights": {"lowest_price": "899", "price_level": "low", "typical_price_range": [850, "1,400"]},
    }


@pytest.fixture
def http_ok():
    def make(payload, status=200):
        res = Mock()
        res.ok = 200 <= status < 300
        res.status_code = status
        res.reason = "OK" if res.ok else "Bad Request"
        res.json.return_value = payload
        res.text = str(payload)
        return res

    return make
