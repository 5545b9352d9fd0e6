"""Command-line entry point for planning a meetup.

Example:
    meetup-planner --member "Saket, New Delhi|1000|food,culture" \
                   --member "Gurgaon Sector 29|800|fun"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

import config
from workflows.runtime import PlannerRuntime
from workflows.schemas import Itinerary, MemberPreferences


def parse_member(value: str) -> MemberPreferences:
    """Parse ``LOCATION|BUDGET|tag1,tag2`` (tags optional)."""
    parts = [p.strip() for p in value.split("|")]
    if len(parts) < 2 or not parts[0]:
        raise argparse.ArgumentTypeError(
            f"Expected 'LOCATION|BUDGET|tag1,tag2', got '{value}'"
        )
    try:
        budget = float(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid budget '{parts[1]}'") from exc
    if budget < 0:
        raise argparse.ArgumentTypeError("Budget must not be negative")
    tags = parts[2] if len(parts) > 2 else ""
    return MemberPreferences(location=parts[0], budget=budget, mood_tags=tags)


def format_itinerary(idx: int, itinerary: Itinerary) -> str:
    lines = [f"{idx}. {itinerary.name}  (~{itinerary.estimated_cost:g}, {itinerary.tier})"]
    if itinerary.description:
        lines.append(f"   {itinerary.description}")
    for step_no, step in enumerate(itinerary.steps, 1):
        hint = f": {step.activity_hint}" if step.activity_hint else ""
        lines.append(f"   {step_no}) {step.venue_name}{hint}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recommend meetup itineraries for a group.")
    parser.add_argument(
        "--member",
        dest="members",
        action="append",
        type=parse_member,
        required=True,
        help="Member as 'LOCATION|BUDGET|tag1,tag2'. Repeat once per member.",
    )
    parser.add_argument(
        "--romantic",
        action="store_true",
        help="Plan a date (only applies to exactly two members).",
    )
    parser.add_argument("--json", action="store_true", help="Print itineraries as JSON.")
    return parser


def main(argv: Optional[Sequence[str]] = None, runtime: Optional[PlannerRuntime] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    runtime = runtime or PlannerRuntime()
    itineraries: List[Itinerary] = runtime.plan_locations(args.members, is_romantic=args.romantic)

    if args.json:
        json.dump([i.model_dump(mode="json") for i in itineraries], sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        for idx, itinerary in enumerate(itineraries, 1):
            print(format_itinerary(idx, itinerary))
            print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
