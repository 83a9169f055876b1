"""Drink statistics Flask app (JSON API).

Run from project root:
    python app.py
"""

import asyncio
import logging
import os
from datetime import datetime
from typing import Any

from flask import Flask, jsonify, request

from drinkstats.calculations import estimate_bac
from drinkstats.config import load_config
from drinkstats.engine import SECTIONS, StatisticsEngine, StatsOptions
from drinkstats.drinks import parse_events, standardize_events
from drinkstats.profile import YamlProfileProvider, resolve_profile

app = Flask(__name__)

MAX_DRINKS = 20000
MIN_LIMIT = 1
MAX_LIMIT = 200


def _profile_path() -> str:
    return os.environ.get("DRINKSTATS_PROFILE", "")


def _config_path() -> str:
    return os.environ.get("DRINKSTATS_CONFIG", "")


def _engine() -> StatisticsEngine:
    profile_path = _profile_path()
    provider = YamlProfileProvider(profile_path) if profile_path else None
    return StatisticsEngine(config=load_config(_config_path() or None), profile_provider=provider)


def _is_valid_date_yyyy_mm_dd(value: str) -> bool:
    try:
        datetime.strptime(value, "%Y-%m-%d")
        return True
    except ValueError:
        return False


def _clamp_int(value: Any, default: int, min_value: int, max_value: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    return max(min_value, min(max_value, parsed))


def _parse_request() -> tuple[Any, Any, Any, str | None]:
    """Pull (drinks, date_range, options, error) out of the JSON body."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return None, None, None, "body must be a JSON object"
    drinks = data.get("drinks", [])
    if not isinstance(drinks, list):
        return None, None, None, "drinks must be a list"
    if len(drinks) > MAX_DRINKS:
        return None, None, None, f"at most {MAX_DRINKS} drinks per request"

    date_range = data.get("dateRange") or data.get("date_range") or {}
    if not isinstance(date_range, dict):
        return None, None, None, "dateRange must be an object"
    start = str(date_range.get("start", ""))
    end = str(date_range.get("end", ""))
    if not _is_valid_date_yyyy_mm_dd(start) or not _is_valid_date_yyyy_mm_dd(end):
        return None, None, None, "dateRange.start and dateRange.end must be YYYY-MM-DD"
    if start > end:
        return None, None, None, "dateRange.start must not be after dateRange.end"

    options = data.get("options") or {}
    if not isinstance(options, dict):
        return None, None, None, "options must be an object"
    options = dict(options)
    if options.get("limit") is not None:
        options["limit"] = _clamp_int(options["limit"], 20, MIN_LIMIT, MAX_LIMIT)
    return drinks, {"start": start, "end": end}, options, None


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/sections")
def api_sections():
    return jsonify({"sections": list(SECTIONS)})


@app.route("/api/stats", methods=["POST"])
def api_stats():
    drinks, date_range, options, error = _parse_request()
    if error:
        return jsonify({"error": error}), 400

    sections = request.args.getlist("section") or None
    if sections and any(s not in SECTIONS for s in sections):
        return jsonify({"error": f"section must be one of {', '.join(SECTIONS)}"}), 400

    stats = _engine().calculate_sync(drinks, date_range, options, sections=sections)
    return jsonify(stats)


@app.route("/api/stats/<section>", methods=["POST"])
def api_stats_section(section: str):
    if section not in SECTIONS:
        return jsonify({"error": f"Unknown section: {section}"}), 404

    drinks, date_range, options, error = _parse_request()
    if error:
        return jsonify({"error": error}), 400

    stats = _engine().calculate_sync(drinks, date_range, options, sections=[section])
    return jsonify(stats[section])


@app.route("/api/bac", methods=["POST"])
def api_bac():
    """Current BAC from raw drinks; ``configured`` is false without weight and gender."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "body must be a JSON object"}), 400
    drinks = data.get("drinks", [])
    if not isinstance(drinks, list):
        return jsonify({"error": "drinks must be a list"}), 400
    options = data.get("options") or {}
    if not isinstance(options, dict):
        return jsonify({"error": "options must be an object"}), 400

    options = StatsOptions.from_dict(options)
    engine = _engine()
    profile = asyncio.run(resolve_profile(options.settings, engine.profile_provider))
    events = standardize_events(parse_events(drinks), engine.unit_table)
    estimate = estimate_bac(events, profile, at=options.evaluation_time, config=engine.config)
    return jsonify({
        "configured": profile.configured,
        "bac": estimate.to_dict() if estimate is not None else None,
    })


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
