# main.py
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

import config
from agents.final_output_agent import FinalOutputAgent
from agents.flight_search_agent import FlightSearchAgent
from agents.request_parser_agent import RequestParserAgent
from models.usage import UsageCounter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search flights from a plain-language request.")
    parser.add_argument("request", nargs="*", help='e.g. "New York to Tokyo on 2026-12-25"')
    parser.add_argument("--origin", help="origin city or airport code (skips the language model)")
    parser.add_argument("--destination", help="destination city or airport code")
    parser.add_argument("--depart", help="departure date, YYYY-MM-DD")
    parser.add_argument("--return", dest="return_date", help="return date, YYYY-MM-DD")
    parser.add_argument("--passengers", type=int)
    parser.add_argument("--class", dest="travel_class", help="economy, premium_economy, business or first")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.settings.log_level.upper(), logging.INFO),
        format="%(levelname)s: %(name)s: %(message)s",
    )
    config.validate()

    if args.origin or args.destination:
        arguments = {
            "origin": args.origin or "",
            "destination": args.destination or "",
            "departureDate": args.depart or "",
            "returnDate": args.return_date,
            "passengers": args.passengers,
            "travelClass": args.travel_class,
        }
    else:
        text = " ".join(args.request).strip() or input("Where would you like to fly? ")
        try:
            arguments = RequestParserAgent().parse(text)
        except ValueError as exc:
            print(f"Sorry, I couldn't understand that request. ({exc})")
            return 2

    usage = UsageCounter(limit=config.settings.usage_limit)
    payload = FlightSearchAgent(usage=usage).run_tool(arguments)
    print(FinalOutputAgent().render(payload))
    print()
    print(usage.label())
    return 1 if payload.get("error") else 0


if __name__ == "__main__":
    sys.exit(main())
