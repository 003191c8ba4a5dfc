# clients/response_normalizer.py
from __future__ import annotations
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from clients.serpapi_schema import (
    FLIGHT_FIELDS,
    PRICE_INSIGHT_FIELDS,
    RESULT_FIELDS,
    SEGMENT_FIELDS,
    AirportSchema,
    CarbonEmissionsSchema,
    FlightSchema,
    FlightSearchResultSchema,
)
from models.errors import UpstreamShapeError
from models.flight import Airport, CarbonEmissions, FlightOption, FlightSegment
from models.search import DEFAULT_SEARCH_URL, NormalizationState, PriceInsights, SearchResult

logger = logging.getLogger(__name__)

FALLBACK_LIMIT = 5
MAX_REPORTED_ERRORS = 5

UNKNOWN_AIRPORT = "Unknown"
UNKNOWN_AIRLINE = "Unknown Airline"
UNKNOWN_FLIGHT_NUMBER = "N/A"
DEFAULT_TRAVEL_CLASS = "economy"

CURRENCY_NOISE = re.compile(r"[$,\s]")


@dataclass
class NormalizationOutcome:
    state: NormalizationState
    result: Optional[SearchResult] = None
    diagnostics: List[str] = field(default_factory=list)
    error: Optional[UpstreamShapeError] = None


def prune_options(
    options: List[FlightOption], label: str = "flights", diagnostics: Optional[List[str]] = None
) -> List[FlightOption]:
    """Drop options whose first segment names no airport and no airline. Order is kept."""
    kept: List[FlightOption] = []
    for index, option in enumerate(options):
        if option.is_identifiable():
            kept.append(option)
        elif diagnostics is not None:
            diagnostics.append(f"{label}[{index}]: no airport or airline information, discarded")
    if diagnostics is not None and len(kept) != len(options):
        logger.info("%s: %d -> %d after filtering", label, len(options), len(kept))
    return kept


class ResponseNormalizer:
    """
    Turns a raw google_flights response into a SearchResult.

    PARSING -> VALID      schema accepted; unidentifiable options pruned
    PARSING -> DEGRADED   schema rejected; best-effort rebuild from the raw body
    PARSING -> REJECTED   nothing usable; outcome carries UpstreamShapeError
    """

    def normalize(self, raw: Any) -> NormalizationOutcome:
        diagnostics: List[str] = []

        try:
            parsed = FlightSearchResultSchema.model_validate(raw)
        except ValidationError as exc:
            diagnostics.extend(self._describe(exc))
            logger.warning("SerpApi response failed validation, attempting graceful degradation: %s", diagnostics)
            return self._degrade(raw, exc, diagnostics)

        result = self._from_schema(parsed, diagnostics)
        return self._finish(NormalizationState.VALID, result, diagnostics)

    # --- strict path ---

    def _from_schema(self, parsed: FlightSearchResultSchema, diagnostics: List[str]) -> SearchResult:
        best = [self._option(f) for f in parsed.best_flights or []]
        other = [self._option(f) for f in parsed.other_flights or []]

        insights = None
        if parsed.price_insights is not None:
            pi = parsed.price_insights
            insights = PriceInsights(
                lowest_price=_float(pi.lowest_price),
                price_level=pi.price_level,
                typical_price_range=[float(x) for x in pi.typical_price_range or []],
                price_history=pi.price_history,
                extra=dict(pi.model_extra or {}),
            )

        metadata = parsed.search_metadata
        return SearchResult(
            best_flights=prune_options(best, "best_flights", diagnostics),
            other_flights=prune_options(other, "other_flights", diagnostics),
            price_insights=insights,
            search_url=(metadata.google_flights_url if metadata else None) or DEFAULT_SEARCH_URL,
            search_parameters=(
                parsed.search_parameters.model_dump(exclude_none=True) if parsed.search_parameters else {}
            ),
            extra=dict(parsed.model_extra or {}),
        )

    def _option(self, schema: FlightSchema) -> FlightOption:
        if schema.flights:
            segments = [self._segment(s, extra=dict(s.model_extra or {})) for s in schema.flights]
        else:
            # legacy flat shape: the option itself is the only segment
            segments = [self._segment(schema)]

        return FlightOption(
            segments=segments,
            price=_float(schema.price),
            total_duration=_minutes(schema.total_duration),
            trip_type=schema.type,
            airline_logo=schema.airline_logo,
            carbon_emissions=_carbon(schema.carbon_emissions),
            departure_token=schema.departure_token,
            legacy=not schema.flights,
            extra=dict(schema.model_extra or {}),
        )

    def _segment(self, schema: Any, extra: Optional[Dict[str, Any]] = None) -> FlightSegment:
        return FlightSegment(
            departure_airport=_airport(schema.departure_airport),
            arrival_airport=_airport(schema.arrival_airport),
            duration=_minutes(schema.duration),
            airline=schema.airline,
            airline_logo=schema.airline_logo,
            flight_number=schema.flight_number,
            travel_class=schema.travel_class,
            airplane=schema.airplane,
            legroom=schema.legroom,
            extensions=list(schema.extensions or []),
            often_delayed_by_over=schema.often_delayed_by_over,
            overnight=getattr(schema, "overnight", None),
            extra=extra or {},
        )

    # --- fallback path ---

    def _degrade(self, raw: Any, exc: ValidationError, diagnostics: List[str]) -> NormalizationOutcome:
        if not isinstance(raw, dict):
            diagnostics.append(f"response body is {type(raw).__name__}, expected an object")
            return self._reject(exc, diagnostics)

        metadata = raw.get("search_metadata")
        parameters = raw.get("search_parameters")
        try:
            result = SearchResult(
                best_flights=self._salvage_list(raw, "best_flights", diagnostics),
                other_flights=self._salvage_list(raw, "other_flights", diagnostics),
                price_insights=self._salvage_insights(raw.get("price_insights")),
                search_url=(_text(metadata.get("google_flights_url")) if isinstance(metadata, dict) else None)
                or DEFAULT_SEARCH_URL,
                search_parameters=dict(parameters) if isinstance(parameters, dict) else {},
                extra={k: v for k, v in raw.items() if k not in RESULT_FIELDS},
            )
        except (TypeError, ValueError, AttributeError) as build_err:
            logger.error("Failed to create fallback structure: %s", build_err)
            diagnostics.append(f"fallback reconstruction failed: {build_err}")
            return self._reject(exc, diagnostics)
        return self._finish(NormalizationState.DEGRADED, result, diagnostics)

    def _salvage_list(self, raw: Dict[str, Any], key: str, diagnostics: List[str]) -> List[FlightOption]:
        entries = raw.get(key)
        if entries is None:
            return []
        if not isinstance(entries, list):
            diagnostics.append(f"{key}: expected a list, got {type(entries).__name__}")
            return []

        kept: List[FlightOption] = []
        for index, item in enumerate(entries):
            if len(kept) >= FALLBACK_LIMIT:
                diagnostics.append(f"{key}: kept {FALLBACK_LIMIT} entries, {len(entries) - index} not examined")
                break
            if not isinstance(item, dict):
                diagnostics.append(f"{key}[{index}]: not an object, discarded")
                continue
            option = self._salvage_option(item)
            if not option.is_identifiable():
                diagnostics.append(f"{key}[{index}]: no airport or airline information, discarded")
                continue
            kept.append(_with_defaults(option))
        return kept

    def _salvage_option(self, item: Dict[str, Any]) -> FlightOption:
        raw_segments = item.get("flights")
        nested = [s for s in raw_segments if isinstance(s, dict)] if isinstance(raw_segments, list) else []

        if nested:
            # the first leg may borrow legacy flat fields the nested leg lacks
            segments = [
                _salvage_segment(seg, item if index == 0 else {}, keep_extra=True)
                for index, seg in enumerate(nested)
            ]
        else:
            segments = [_salvage_segment(item, {}, keep_extra=False)]

        carbon_raw = item.get("carbon_emissions")
        carbon = None
        if isinstance(carbon_raw, dict):
            carbon = CarbonEmissions(
                this_flight=_number(carbon_raw.get("this_flight")),
                typical_for_this_route=_number(carbon_raw.get("typical_for_this_route")),
                difference_percent=_number(carbon_raw.get("difference_percent")),
            )

        return FlightOption(
            segments=segments,
            price=_number(item.get("price")),
            total_duration=_minutes(_number(item.get("total_duration"))),
            trip_type=_text(item.get("type")),
            airline_logo=_text(item.get("airline_logo")),
            carbon_emissions=carbon,
            departure_token=_text(item.get("departure_token")),
            legacy=not nested,
            extra={k: v for k, v in item.items() if k not in FLIGHT_FIELDS},
        )

    def _salvage_insights(self, raw: Any) -> Optional[PriceInsights]:
        if not isinstance(raw, dict):
            return None
        price_range = raw.get("typical_price_range")
        return PriceInsights(
            lowest_price=_number(raw.get("lowest_price")),
            price_level=_text(raw.get("price_level")),
            typical_price_range=[
                n for n in (_number(x) for x in price_range) if n is not None
            ] if isinstance(price_range, list) else [],
            price_history=raw.get("price_history"),
            extra={k: v for k, v in raw.items() if k not in PRICE_INSIGHT_FIELDS},
        )

    # --- transitions ---

    def _finish(self, state: NormalizationState, result: SearchResult, diagnostics: List[str]) -> NormalizationOutcome:
        result.state = state
        result.diagnostics = list(diagnostics)
        logger.info(
            "Normalized SerpApi response (%s): %d best, %d other",
            state.value,
            len(result.best_flights),
            len(result.other_flights),
        )
        return NormalizationOutcome(state=state, result=result, diagnostics=diagnostics)

    def _reject(self, exc: ValidationError, diagnostics: List[str]) -> NormalizationOutcome:
        error = UpstreamShapeError(
            "Flight search failed: the flight data returned by SerpApi could not be read.",
            details=f"{exc.error_count()} validation errors; " + "; ".join(diagnostics[:MAX_REPORTED_ERRORS]),
            suggestions="Please try again in a moment, or search on Google Flights directly.",
        )
        logger.error("SerpApi response rejected: %s", error.details)
        return NormalizationOutcome(state=NormalizationState.REJECTED, diagnostics=diagnostics, error=error)

    def _describe(self, exc: ValidationError) -> List[str]:
        errors = exc.errors()
        lines = []
        for err in errors[:MAX_REPORTED_ERRORS]:
            location = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
            lines.append(f"{location}: {err.get('msg')}")
        if len(errors) > MAX_REPORTED_ERRORS:
            lines.append(f"... {len(errors) - MAX_REPORTED_ERRORS} more validation errors")
        return lines


def _float(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return float(value)


def _minutes(value: Optional[float]) -> Optional[int]:
    if value is None or not math.isfinite(value):
        return None
    return int(value)


def _airport(schema: Optional[AirportSchema]) -> Optional[Airport]:
    if schema is None:
        return None
    return Airport(name=schema.name or "", code=schema.id or "", time=schema.time or "")


def _carbon(schema: Optional[CarbonEmissionsSchema]) -> Optional[CarbonEmissions]:
    if schema is None:
        return None
    return CarbonEmissions(
        this_flight=_float(schema.this_flight),
        typical_for_this_route=_float(schema.typical_for_this_route),
        difference_percent=_float(schema.difference_percent),
    )


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = _parse_number(value.strip())
        if number is None:
            # "$1,234" -> 1234.0
            number = _parse_number(CURRENCY_NOISE.sub("", value))
    else:
        return None
    return number if number is not None and math.isfinite(number) else None


def _parse_number(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


def _loose_airport(value: Any) -> Optional[Airport]:
    if not isinstance(value, dict):
        return None
    airport = Airport(
        name=_text(value.get("name")) or "",
        code=_text(value.get("id")) or "",
        time=_text(value.get("time")) or "",
    )
    return airport if (airport.is_identifiable() or airport.time) else None


def _salvage_segment(primary: Dict[str, Any], fallback: Dict[str, Any], keep_extra: bool) -> FlightSegment:
    def pick(key: str, convert):
        for source in (primary, fallback):
            value = convert(source.get(key))
            if value is not None:
                return value
        return None

    extensions = pick("extensions", lambda v: v if isinstance(v, list) else None) or []
    overnight = primary.get("overnight")
    return FlightSegment(
        departure_airport=pick("departure_airport", _loose_airport),
        arrival_airport=pick("arrival_airport", _loose_airport),
        duration=_minutes(pick("duration", _number)),
        airline=pick("airline", _text),
        airline_logo=pick("airline_logo", _text),
        flight_number=pick("flight_number", _text),
        travel_class=pick("travel_class", _text),
        airplane=pick("airplane", _text),
        legroom=pick("legroom", _text),
        extensions=[e for e in extensions if isinstance(e, str)],
        often_delayed_by_over=pick("often_delayed_by_over", _text),
        overnight=overnight if isinstance(overnight, bool) else None,
        extra={k: v for k, v in primary.items() if k not in SEGMENT_FIELDS} if keep_extra else {},
    )


def _with_defaults(option: FlightOption) -> FlightOption:
    for segment in option.segments:
        for attr in ("departure_airport", "arrival_airport"):
            airport = getattr(segment, attr)
            if airport is None:
                setattr(segment, attr, Airport(name=UNKNOWN_AIRPORT))
            elif not airport.name:
                airport.name = UNKNOWN_AIRPORT
        segment.airline = segment.airline or UNKNOWN_AIRLINE
        segment.flight_number = segment.flight_number or UNKNOWN_FLIGHT_NUMBER
        segment.travel_class = segment.travel_class or DEFAULT_TRAVEL_CLASS
    return option
