# agents/request_parser_agent.py
from __future__ import annotations
import json
import logging
import re
from datetime import date
from typing import Any, Dict, Optional

import ollama

from config import Settings, settings as default_settings
from utils.date_parser import extract_first_date, to_iso

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are a flight request parser. Given a user's message about a flight, respond with ONLY a JSON object using this exact shape:
{
  "origin": "<city name in English or IATA airport code>",
  "destination": "<city name in English or IATA airport code>",
  "departureDate": "<YYYY-MM-DD>" or null,
  "returnDate": "<YYYY-MM-DD>" or null,
  "passengers": <integer> or null,
  "travelClass": "economy" | "premium_economy" | "business" | "first" | null
}
Rules:
- You will be given today's date; if the user omits the year, pick the next occurrence on or after today.
- Only output future dates, always in YYYY-MM-DD format.
- Prefer IATA airport codes; otherwise use the common English city name.
- returnDate is only set for round trips and must be after departureDate.
- If the request is not about flights, respond with {"error":"non_travel"}.
- Respond with valid JSON only; no markdown or extra text.
"""

CLASS_ALIASES = {
    "coach": "economy",
    "premium": "premium_economy",
    "premium economy": "premium_economy",
    "business class": "business",
    "first class": "first",
}


class RequestParserAgent:
    """
    Turns a natural-language flight request into searchFlights tool arguments
    using a local ollama model. Raises ValueError when the model output is
    unusable or the request is not about flights.
    """

    def __init__(self, model: Optional[str] = None, settings: Settings = default_settings):
        self.model = model or settings.ollama_model

    def parse(self, user_input: str, today: Optional[date] = None) -> Dict[str, Any]:
        today_iso = (today or date.today()).isoformat()
        response = ollama.chat(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT.strip()},
                {"role": "user", "content": f"Today is {today_iso}. Parse this flight request: {user_input}"},
            ],
        )

        content = response.get("message", {}).get("content", "").strip()
        if not content:
            raise ValueError("Empty model response.")

        data = self._load_json(content)
        if data.get("error") == "non_travel":
            raise ValueError("I can only help with flight searches.")

        arguments = {
            "origin": str(data.get("origin") or "").strip(),
            "destination": str(data.get("destination") or "").strip(),
            "departureDate": self._date(data.get("departureDate")),
            "returnDate": self._date(data.get("returnDate")),
            "passengers": data.get("passengers") or None,
            "travelClass": self._travel_class(data.get("travelClass")),
        }

        # the model sometimes drops the date; look for one in the user's own words
        if not arguments["departureDate"]:
            found = extract_first_date(user_input)
            if found:
                arguments["departureDate"] = found.isoformat()

        if not arguments["origin"] or not arguments["destination"]:
            raise ValueError("Please tell me where you are flying from and where you are flying to.")
        if not arguments["departureDate"]:
            raise ValueError("Please tell me which date you want to fly (YYYY-MM-DD).")

        logger.info("Parsed flight request: %s", arguments)
        return {k: v for k, v in arguments.items() if v is not None}

    def _load_json(self, content: str) -> Dict[str, Any]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            # salvage a JSON object from a chatty response
            match = re.search(r"\{.*\}", content, re.DOTALL)
            if not match:
                raise ValueError("Model did not return valid JSON.") from exc
            try:
                data = json.loads(match.group(0))
            except json.JSONDecodeError:
                raise ValueError("Model did not return valid JSON.") from exc

        if not isinstance(data, dict):
            raise ValueError("Model did not return a JSON object.")
        return data

    def _date(self, value: Any) -> Optional[str]:
        if value in (None, "", "null"):
            return None
        return to_iso(str(value)) or str(value)

    def _travel_class(self, value: Any) -> Optional[str]:
        if not value or not isinstance(value, str):
            return None
        cleaned = value.strip().lower()
        return CLASS_ALIASES.get(cleaned, cleaned)
