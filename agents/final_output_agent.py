# agents/final_output_agent.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from utils.formatting import format_date, format_duration, format_price, format_stops, format_time

PRICE_LEVEL_ARROWS = {"low": "↓", "high": "↑"}


class FinalOutputAgent:
    """Renders searchFlights payloads (success or error) as markdown."""

    def render(self, payload: Dict[str, Any]) -> str:
        if payload.get("error"):
            return self.render_error(payload)

        params = payload.get("searchParameters") or {}
        lines: List[str] = []

        lines.append("✈️ Flight Search Results")
        lines.append("")
        dates = params.get("departureDate") or "n/a"
        if params.get("returnDate"):
            dates += f" → {params['returnDate']}"
        lines.append(f"- **Route:** {params.get('origin', 'n/a')} → {params.get('destination', 'n/a')}")
        lines.append(f"- **Dates:** {dates}")
        lines.append(
            f"- **Passengers:** {params.get('passengers', 1)} | **Class:** "
            f"{str(params.get('travelClass') or 'economy').replace('_', ' ')} | **Trip:** {params.get('tripType', 'n/a')}"
        )
        if payload.get("searchUrl"):
            lines.append(f"- [View on Google Flights]({payload['searchUrl']})")

        insight = self._price_insight(payload.get("priceInsights"))
        if insight:
            lines.append(f"- **Prices:** {insight}")

        if payload.get("resultQuality") == "degraded":
            lines.append("")
            lines.append("⚠️ Some flight details could not be read and are shown as Unknown.")
        lines.append("")

        best = payload.get("bestFlights") or []
        other = payload.get("otherFlights") or []
        if not best and not other:
            lines.append("- _No flights found._")
            return "\n".join(lines)

        if best:
            lines.append("### Best Flights")
            for flight in best:
                lines.extend(self.render_card(flight, best_value=True))
                lines.append("")
        if other:
            lines.append("### Other Flights")
            for flight in other:
                lines.extend(self.render_card(flight))
                lines.append("")

        total = payload.get("totalResults", len(best) + len(other))
        lines.append(f"_Showing {len(best) + len(other)} of {total} flights._")
        return "\n".join(lines)

    def render_card(self, flight: Dict[str, Any], best_value: bool = False) -> List[str]:
        legs = flight.get("flights") or []
        first = legs[0] if legs else flight
        last = legs[-1] if legs else first
        stops = flight.get("stops", max(0, len(legs) - 1))

        airline = first.get("airline") or flight.get("airline") or "Unknown Airline"
        if stops:
            ident = format_stops(stops)
        else:
            ident = first.get("flight_number") or flight.get("flight_number") or "N/A"

        badge = "✨ Best Value | " if best_value else ""
        header = f"{badge}**{airline}** / {ident}"
        price = format_price(flight.get("price"))
        if price:
            header += f" | **{price}**"

        departure = first.get("departure_airport") or {}
        arrival = last.get("arrival_airport") or {}
        duration = format_duration(flight.get("total_duration"))
        middle = f"{duration}, {format_stops(stops)}" if duration else format_stops(stops)
        return [
            header,
            f"  {self._endpoint(departure)} → {middle} → {self._endpoint(arrival)}",
        ]

    def render_error(self, payload: Dict[str, Any]) -> str:
        lines = [f"❌ {payload['error']}"]
        if payload.get("details"):
            lines.append(f"Details: {payload['details']}")
        if payload.get("suggestions"):
            lines.append("")
            lines.append(str(payload["suggestions"]).strip())
        return "\n".join(lines)

    def _endpoint(self, airport: Dict[str, Any]) -> str:
        time = airport.get("time")
        day = format_date(time)
        when = f"{format_time(time)} - {day}" if day else format_time(time)
        return f"{when} {airport.get('name') or 'Unknown'} ({airport.get('id') or 'N/A'})"

    def _price_insight(self, insights: Optional[Dict[str, Any]]) -> str:
        if not insights:
            return ""
        bits = []
        level = insights.get("price_level")
        if level:
            bits.append(f"{PRICE_LEVEL_ARROWS.get(level, '–')} {level}")
        if insights.get("lowest_price") is not None:
            bits.append(f"lowest {format_price(insights['lowest_price'])}")
        price_range = insights.get("typical_price_range") or []
        if len(price_range) >= 2:
            bits.append(f"typical {format_price(price_range[0])}–{format_price(price_range[1])}")
        return ", ".join(bits)
