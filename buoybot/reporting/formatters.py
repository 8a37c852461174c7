"""Output formatters for tides, observation reports and cycle summaries."""

import json

from buoybot.models.errors import InvalidTideFlagError, MissingTideError
from buoybot.models.observation import Observation, TideFlag, TidePrediction
from buoybot.models.reporting import CycleSummary

DEFAULT_TITLE = "SF Buoy"

# RFC 822 layout, e.g. "01 Mar 16 04:00 PST".
REPORT_TIME_FORMAT = "%d %b %y %H:%M %Z"

_TIDE_WORDS = {TideFlag.HIGH: "High", TideFlag.LOW: "Low"}


def tide_word(flag: str) -> str:
    """Map a stored high/low flag to its display word.

    Anything other than "H" or "L" is rejected rather than defaulted.
    """
    try:
        return _TIDE_WORDS[TideFlag(flag)]
    except ValueError:
        raise InvalidTideFlagError(flag) from None


def format_tide(tide: TidePrediction | None) -> str:
    if tide is None:
        raise MissingTideError("No upcoming tide prediction available")
    return f"Tide: {tide_word(tide.high_low)} {tide.predicted_ft:.1f}ft at {tide.time}"


def format_observation_lines(obs: Observation) -> list[str]:
    """Swell and wind lines shared by the report and the CLI."""
    return [
        f"Swell: {obs.wave_height_ft:.1f}ft at {obs.dominant_period_s} sec "
        f"from {obs.mean_wave_direction}",
        f"Wind: {obs.wind_speed_mph:.0f}mph from {obs.wind_direction}",
    ]


def compose_report(
    obs: Observation, tide_text: str, title: str = DEFAULT_TITLE
) -> str:
    """Publishable multi-line report. The tide text is embedded verbatim."""
    lines = [f"{title} at {obs.observed_at.strftime(REPORT_TIME_FORMAT)}"]
    lines.extend(format_observation_lines(obs))
    lines.append(tide_text)
    lines.append(f"Water Temp: {obs.water_temp_f:.1f}F")
    lines.append(f"Air Temp: {obs.air_temp_f:.1f}F")
    return "\n".join(lines)


def format_summary_text(s: CycleSummary) -> str:
    """Plain text cycle summary for logging."""
    lines = [
        f"=== Cycle {s.status.value} | {s.station_id} | {s.cycle_id[:8]} ===",
    ]
    if s.observation_row_id is not None:
        lines.append(f"Observation saved: row {s.observation_row_id}")
    if s.used_fallbacks:
        lines.append(f"Fallbacks: {', '.join(s.used_fallbacks)}")
    if s.publish_status:
        post = f" (post {s.post_id})" if s.post_id else ""
        lines.append(f"Publish: {s.publish_status}{post}")
    if s.errors:
        lines.append(f"Errors: {'; '.join(s.errors)}")
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_summary_json(s: CycleSummary) -> str:
    data = {
        "cycle_id": s.cycle_id,
        "station_id": s.station_id,
        "status": s.status.value,
        "observation_row_id": s.observation_row_id,
        "publish_status": s.publish_status,
        "post_id": s.post_id,
        "used_fallbacks": s.used_fallbacks,
        "duration_seconds": s.duration_seconds,
        "errors": s.errors,
    }
    return json.dumps(data, indent=2)
