# clients/serpapi_schema.py
"""
Wire schema for SerpApi's google_flights engine.

Every model accepts unknown fields (they show up in ``model_extra``) because
the response shape drifts over time. Scalars are strict: a price sent as a
string is a schema failure, which sends the response down the fallback path.
"""
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr

Number = Union[StrictInt, StrictFloat]


class PassthroughModel(BaseModel):
    # NaN / Infinity fail the strict pass
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)


class AirportSchema(PassthroughModel):
    name: Optional[StrictStr] = None
    id: Optional[StrictStr] = None
    time: Optional[StrictStr] = None


class FlightSegmentSchema(PassthroughModel):
    departure_airport: Optional[AirportSchema] = None
    arrival_airport: Optional[AirportSchema] = None
    duration: Optional[Number] = None
    airplane: Optional[StrictStr] = None
    airline: Optional[StrictStr] = None
    airline_logo: Optional[StrictStr] = None
    travel_class: Optional[StrictStr] = None
    flight_number: Optional[StrictStr] = None
    legroom: Optional[StrictStr] = None
    extensions: Optional[List[StrictStr]] = None
    often_delayed_by_over: Optional[StrictStr] = None
    overnight: Optional[StrictBool] = None


class CarbonEmissionsSchema(PassthroughModel):
    this_flight: Optional[Number] = None
    typical_for_this_route: Optional[Number] = None
    difference_percent: Optional[Number] = None


class FlightSchema(PassthroughModel):
    # nested multi-segment shape
    flights: Optional[List[FlightSegmentSchema]] = None
    price: Optional[Number] = None
    total_duration: Optional[Number] = None
    type: Optional[StrictStr] = None
    airline_logo: Optional[StrictStr] = None
    carbon_emissions: Optional[CarbonEmissionsSchema] = None
    departure_token: Optional[StrictStr] = None

    # legacy flat single-segment shape
    departure_airport: Optional[AirportSchema] = None
    arrival_airport: Optional[AirportSchema] = None
    duration: Optional[Number] = None
    airplane: Optional[StrictStr] = None
    airline: Optional[StrictStr] = None
    travel_class: Optional[StrictStr] = None
    flight_number: Optional[StrictStr] = None
    legroom: Optional[StrictStr] = None
    extensions: Optional[List[StrictStr]] = None
    often_delayed_by_over: Optional[StrictStr] = None


class PriceInsightsSchema(PassthroughModel):
    lowest_price: Optional[Number] = None
    price_level: Optional[StrictStr] = None
    typical_price_range: Optional[List[Number]] = None
    # objects, [timestamp, price] pairs, or anything else
    price_history: Any = None


class SearchMetadataSchema(PassthroughModel):
    id: Optional[StrictStr] = None
    status: Optional[StrictStr] = None
    json_endpoint: Optional[StrictStr] = None
    created_at: Optional[StrictStr] = None
    processed_at: Optional[StrictStr] = None
    google_flights_url: Optional[StrictStr] = None
    total_time_taken: Optional[Number] = None


class SearchParametersSchema(PassthroughModel):
    engine: Optional[StrictStr] = None
    departure_id: Optional[StrictStr] = None
    arrival_id: Optional[StrictStr] = None
    outbound_date: Optional[StrictStr] = None
    return_date: Optional[StrictStr] = None
    travel_class: Optional[Union[StrictStr, StrictInt]] = None
    adults: Optional[Number] = None


class FlightSearchResultSchema(PassthroughModel):
    best_flights: Optional[List[FlightSchema]] = None
    other_flights: Optional[List[FlightSchema]] = None
    price_insights: Optional[PriceInsightsSchema] = None
    search_metadata: Optional[SearchMetadataSchema] = None
    search_parameters: Optional[SearchParametersSchema] = None


SEGMENT_FIELDS = frozenset(FlightSegmentSchema.model_fields)
FLIGHT_FIELDS = frozenset(FlightSchema.model_fields)
PRICE_INSIGHT_FIELDS = frozenset(PriceInsightsSchema.model_fields)
RESULT_FIELDS = frozenset(FlightSearchResultSchema.model_fields)
