"""
Drink statistics CLI. Run from project root: python -m drinkstats.main drinks.yaml
Reads a YAML (or JSON) list of drinks and prints the statistics as JSON.
"""

import argparse
import json
import logging
import sys
from datetime import date

import yaml

from drinkstats.config import load_config
from drinkstats.engine import SECTIONS, StatisticsEngine
from drinkstats.profile import YamlProfileProvider


def _load_drinks(path):
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("drinks") or []
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of drinks")
    return data


def main(argv=None):
    parser = argparse.ArgumentParser(description="Drink log statistics: sessions, BAC and risk")
    parser.add_argument("drinks", help="YAML or JSON file with a list of drinks")
    parser.add_argument("--start", help="Period start YYYY-MM-DD (default: first drink)")
    parser.add_argument("--end", help="Period end YYYY-MM-DD (default: today)")
    parser.add_argument("--period", default="custom", help="day | week | month | year | custom")
    parser.add_argument("--weight", type=float, help="Body weight (kg)")
    parser.add_argument("--gender", choices=["male", "female"], help="Gender for BAC and limits")
    parser.add_argument("--profile", metavar="FILE", help="YAML profile with weight_kg and gender")
    parser.add_argument("--config", metavar="FILE", help="YAML config overriding thresholds")
    parser.add_argument("--section", action="append", choices=SECTIONS, help="Only compute this section")
    parser.add_argument("--at", help="Evaluate BAC at this ISO time instead of now")
    parser.add_argument("--limit", type=int, help="Max drinks listed in the drinks section")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped records")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        drinks = _load_drinks(args.drinks)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    dates = sorted(str(d.get("date")) for d in drinks if isinstance(d, dict) and d.get("date"))
    date_range = {
        "start": args.start or (dates[0] if dates else date.today().isoformat()),
        "end": args.end or date.today().isoformat(),
    }

    options = {"currentPeriod": args.period, "limit": args.limit, "evaluationTime": args.at}
    if args.weight is not None or args.gender is not None:
        options["settings"] = {"weight_kg": args.weight, "gender": args.gender}

    provider = YamlProfileProvider(args.profile) if args.profile else None
    engine = StatisticsEngine(config=config, profile_provider=provider)
    stats = engine.calculate_sync(drinks, date_range, options, sections=args.section)
    print(json.dumps(stats, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
