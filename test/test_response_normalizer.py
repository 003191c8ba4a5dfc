import copy

import pytest

from clients.response_normalizer import FALLBACK_LIMIT, ResponseNormalizer, prune_options
from models.errors import UpstreamShapeError
from models.flight import Airport, FlightOption, FlightSegment
from models.search import DEFAULT_SEARCH_URL, NormalizationState

from conftest import empty_flight, legacy_flight, nested_flight


@pytest.fixture
def normalizer():
    return ResponseNormalizer()


def test_valid_response_keeps_order_and_prunes_unidentifiable(normalizer, raw_response):
    outcome = normalizer.normalize(raw_response)

    assert outcome.state is NormalizationState.VALID
    result = outcome.result
    assert [f.airline for f in result.best_flights] == ["Japan Airlines", "ANA"]
    assert [f.airline for f in result.other_flights] == ["Delta", "United"]
    assert "best_flights[1]: no airport or airline information, discarded" in outcome.diagnostics
    assert "other_flights[1]: no airport or airline information, discarded" in outcome.diagnostics
    assert result.search_url == "https://www.google.com/travel/flights?hl=en&tfs=abc"
    assert result.search_parameters["departure_id"] == "JFK"


def test_multi_leg_option_spans_first_departure_to_last_arrival(normalizer, raw_response):
    ana = normalizer.normalize(raw_response).result.best_flights[1]

    assert len(ana.segments) == 2
    assert ana.stops == 1
    assert ana.departure.code == "JFK"
    assert ana.arrival.code == "NRT"
    assert ana.total_duration == 800


def test_legacy_flat_option_becomes_single_segment(normalizer, raw_response):
    delta = normalizer.normalize(raw_response).result.other_flights[0]

    assert delta.legacy is True
    assert len(delta.segments) == 1
    assert delta.departure.name == "John F. Kennedy International Airport"
    assert delta.segments[0].flight_number == "DL 181"
    assert delta.duration_minutes == 840
    assert delta.to_dict()["total_duration"] == 840


def test_unknown_fields_are_kept_in_extra(normalizer, raw_response):
    result = normalizer.normalize(raw_response).result
    jal = result.best_flights[0]

    assert jal.extra == {"layovers": []}
    assert jal.segments[0].extra == {"plane_and_crew_by": "Operated by partner"}
    assert result.extra == {"airports": [{"departure": [], "arrival": []}]}
    assert jal.to_dict()["flights"][0]["plane_and_crew_by"] == "Operated by partner"


def test_price_insights_accept_history_as_pairs(normalizer, raw_response):
    insights = normalizer.normalize(raw_response).result.price_insights

    assert insights.lowest_price == 899
    assert insights.price_level == "typical"
    assert insights.typical_price_range == [850, 1400]
    assert insights.price_history == [[1735689600, 1020], [1735776000, 1010]]


def test_missing_metadata_uses_default_search_url(normalizer):
    outcome = normalizer.normalize({"best_flights": [nested_flight()]})
    assert outcome.state is NormalizationState.VALID
    assert outcome.result.search_url == DEFAULT_SEARCH_URL
    assert outcome.result.other_flights == []


def test_option_with_nothing_identifiable_is_dropped_from_both_lists(normalizer):
    outcome = normalizer.normalize({"best_flights": [empty_flight()], "other_flights": [empty_flight(), empty_flight()]})

    assert outcome.state is NormalizationState.VALID
    assert outcome.result.best_flights == []
    assert outcome.result.other_flights == []
    assert len(outcome.diagnostics) == 3


def test_first_segment_decides_identity(normalizer):
    flight = nested_flight(legs=("JFK", "ORD", "NRT"))
    flight["flights"][0] = {"duration": 100, "departure_airport": {"name": "", "id": ""}}
    outcome = normalizer.normalize({"best_flights": [flight]})
    assert outcome.result.best_flights == []


def test_pruning_is_idempotent(normalizer, raw_response):
    options = normalizer.normalize(raw_response).result.best_flights
    options.append(FlightOption(segments=[FlightSegment()]))

    once = prune_options(options)
    twice = prune_options(once)

    assert once == twice
    assert len(once) == 2


def test_pruning_keeps_airline_only_or_airport_only_options():
    airline_only = FlightOption(segments=[FlightSegment(airline="KLM")])
    airport_only = FlightOption(segments=[FlightSegment(arrival_airport=Airport(code="AMS"))])
    nothing = FlightOption(segments=[FlightSegment(arrival_airport=Airport(time="2026-01-01 10:00"))])
    no_segments = FlightOption()

    assert prune_options([nothing, airline_only, no_segments, airport_only]) == [airline_only, airport_only]


def test_schema_mismatch_degrades_to_best_effort(normalizer, broken_response):
    outcome = normalizer.normalize(broken_response)

    assert outcome.state is NormalizationState.DEGRADED
    result = outcome.result
    assert result.state is NormalizationState.DEGRADED
    assert len(result.best_flights) == FALLBACK_LIMIT
    assert [f.price for f in result.best_flights] == [1000, 1001, 1002, 1003, 1004]
    assert result.search_url == "https://www.google.com/travel/flights?tfs=xyz"
    assert any(d.startswith("best_flights.0.price") for d in outcome.diagnostics)
    assert "best_flights: kept 5 entries, 2 not examined" in outcome.diagnostics


def test_degraded_entries_prefer_nested_then_flat_then_defaults(normalizer, broken_response):
    other = normalizer.normalize(broken_response).result.other_flights

    assert len(other) == 2
    partial, flat = other

    leg = partial.segments[0]
    assert leg.airline == "Partial Air"
    assert leg.duration == 95
    assert leg.departure_airport.name == "Unknown"
    assert leg.arrival_airport.name == "Unknown"
    assert leg.flight_number == "N/A"
    assert leg.travel_class == "economy"
    assert partial.price == 450
    assert partial.total_duration is None
    assert partial.extra == {"booking_hint": "x"}

    assert flat.legacy is True
    assert flat.departure.code == "JFK"
    assert flat.departure.name == "Unknown"
    assert flat.airline == "Flat Air"


def test_degraded_entries_drop_non_objects_and_unidentifiable(normalizer, broken_response):
    outcome = normalizer.normalize(broken_response)
    assert "other_flights[0]: not an object, discarded" in outcome.diagnostics
    assert "other_flights[3]: no airport or airline information, discarded" in outcome.diagnostics


def test_degraded_nested_leg_borrows_flat_fields():
    raw = {
        "best_flights": [
            {
                "flights": [{"arrival_airport": {"id": "NRT"}}],
                "departure_airport": {"name": "JFK Terminal 1", "id": "JFK"},
                "airline": "Legacy Air",
                "price": "n/a",
            }
        ]
    }
    option = ResponseNormalizer().normalize(raw).result.best_flights[0]

    assert option.segments[0].departure_airport.code == "JFK"
    assert option.segments[0].arrival_airport.code == "NRT"
    assert option.airline == "Legacy Air"
    assert option.price is None


def test_degraded_price_insights_are_coerced(normalizer, broken_response):
    insights = normalizer.normalize(broken_response).result.price_insights
    assert insights.lowest_price == 899
    assert insights.typical_price_range == [850, 1400]


def test_degraded_lists_of_wrong_type_become_empty(normalizer):
    outcome = normalizer.normalize({"best_flights": "soon", "other_flights": [legacy_flight()]})

    assert outcome.state is NormalizationState.DEGRADED
    assert outcome.result.best_flights == []
    assert len(outcome.result.other_flights) == 1
    assert "best_flights: expected a list, got str" in outcome.diagnostics


@pytest.mark.parametrize("raw", [["best_flights"], "Internal error", None, 42])
def test_non_object_body_is_rejected(normalizer, raw):
    outcome = normalizer.normalize(raw)

    assert outcome.state is NormalizationState.REJECTED
    assert outcome.result is None
    assert isinstance(outcome.error, UpstreamShapeError)
    assert outcome.error.to_payload()["errorType"] == "upstream_shape_invalid"


def test_normalize_does_not_modify_raw(normalizer, broken_response):
    before = copy.deepcopy(broken_response)
    normalizer.normalize(broken_response)
    assert broken_response == before


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_fail_strict_pass_and_are_dropped(normalizer, bad):
    raw = {"best_flights": [{"flights": [{"airline": "X", "duration": bad}], "price": 1, "total_duration": bad}]}
    outcome = normalizer.normalize(raw)

    assert outcome.state is NormalizationState.DEGRADED
    option = outcome.result.best_flights[0]
    assert option.segments[0].duration is None
    assert option.total_duration is None
    assert option.duration_minutes is None
    assert option.price == 1


def test_non_finite_numeric_strings_are_dropped(normalizer):
    raw = {"best_flights": [{"flights": [{"airline": "X", "duration": "1e999"}], "price": "NaN"}]}
    option = normalizer.normalize(raw).result.best_flights[0]
    assert option.segments[0].duration is None
    assert option.price is None


@pytest.mark.parametrize(
    "price, expected",
    [("1e5", 100000), ("$1,234", 1234), (" 450 ", 450), ("1,234.50", 1234.5), ("10-20", None), ("n/a", None)],
)
def test_numeric_strings_are_coerced_without_guessing(normalizer, price, expected):
    raw = {"best_flights": [{"airline": "Coerce Air", "price": price}]}
    option = normalizer.normalize(raw).result.best_flights[0]
    assert option.price == expected


def test_normalizer_keeps_no_state_between_calls(normalizer, raw_response):
    assert normalizer.normalize("Internal error").state is NormalizationState.REJECTED
    assert normalizer.normalize(raw_response).state is NormalizationState.VALID
    assert not hasattr(normalizer, "state")
