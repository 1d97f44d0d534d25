"""Reading and writing analysis records as JSON.

Records map field-for-field onto the JSON objects below. Optional
fields may be absent or null, both meaning "not supplied". Unknown keys
and files that are not valid JSON raise `RecordError`.

    SeismicEvent { magnitude?: float, depth: float, duration?: float,
                   faultOrientation: string, thermalGradient: float,
                   stressField?: { magnitude: float, direction: string },
                   temperature?: float, pressure?: float,
                   ruptureVelocity?: float, rockComposition?: [string] }
    GeologicalProfile { depthRange: [float, float], temperatureThreshold: float,
                        pressureFactor: float, rockComposition: [string] }
    AnalysisResult { isAnomalous: bool, confidence: float,
                     indicators: [string], riskLevel: string }

Functions
---------
read_profile(profile_ffp)
    Read a geological profile from a JSON file.
read_events(events_ffp)
    Read one or more seismic events from a JSON file.
write_results(results, results_ffp)
    Write analysis results to a JSON file.

Exceptions
----------
- RecordError: Exception raised for malformed records.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional

from deep_rupture.events import SeismicEvent, StressField
from deep_rupture.pipeline import AnalysisResult
from deep_rupture.profile import GeologicalProfile
from deep_rupture.risk import RiskLevel
from deep_rupture.scoring import IndicatorName

# (JSON key, attribute name) of the optional numeric event fields.
OPTIONAL_EVENT_FIELDS = [
    ("magnitude", "magnitude"),
    ("duration", "duration"),
    ("temperature", "temperature"),
    ("pressure", "pressure"),
    ("ruptureVelocity", "rupture_velocity"),
]
EVENT_FIELDS = {
    "depth",
    "faultOrientation",
    "thermalGradient",
    "stressField",
    "rockComposition",
} | {key for key, _ in OPTIONAL_EVENT_FIELDS}
STRESS_FIELD_FIELDS = {"magnitude", "direction"}
PROFILE_FIELDS = {
    "depthRange",
    "temperatureThreshold",
    "pressureFactor",
    "rockComposition",
}
RESULT_FIELDS = {"isAnomalous", "confidence", "indicators", "riskLevel"}


class RecordError(ValueError):
    """Exception raised for malformed JSON records."""

    pass


def _require(record: Mapping[str, Any], key: str, label: str) -> Any:
    """Fetch a required key from a record.

    Parameters
    ----------
    record : Mapping[str, Any]
        The record.
    key : str
        The key to fetch.
    label : str
        The name of the record type, for error messages.

    Returns
    -------
    Any
        The value of the key.

    Raises
    ------
    RecordError
        If the record is not a mapping, or the key is absent or null.
    """
    if not isinstance(record, Mapping):
        raise RecordError(f"Expecting {label} object, got: {record!r}")
    value = record.get(key)
    if value is None:
        raise RecordError(f"{label} is missing required field '{key}'.")
    return value


def _check_fields(record: Mapping[str, Any], fields: set[str], label: str) -> None:
    """Reject records that are not objects or hold unknown keys.

    Parameters
    ----------
    record : Mapping[str, Any]
        The record.
    fields : set[str]
        The keys the record may contain.
    label : str
        The name of the record type, for error messages.

    Raises
    ------
    RecordError
        If the record is not a mapping or contains unknown keys.
    """
    if not isinstance(record, Mapping):
        raise RecordError(f"Expecting {label} object, got: {record!r}")
    unknown_fields = set(record) - fields
    if unknown_fields:
        raise RecordError(f"{label} has unknown fields: {sorted(unknown_fields)}.")


def _read_number(value: Any, key: str) -> float:
    """Convert a JSON value to a float.

    Parameters
    ----------
    value : Any
        The JSON value.
    key : str
        The key of the value, for error messages.

    Returns
    -------
    float
        The value as a float.

    Raises
    ------
    RecordError
        If the value is not a number.
    """
    # bool is a subclass of int, but true/false are not measurements.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordError(f'Expecting number ({key}), got: "{value}"')
    return float(value)


def _read_optional_number(record: Mapping[str, Any], key: str) -> Optional[float]:
    """Read an optional number from a record, returning None if absent or null."""
    value = record.get(key)
    return None if value is None else _read_number(value, key)


def _read_string(value: Any, key: str) -> str:
    """Check a JSON value is a string, returning it."""
    if not isinstance(value, str):
        raise RecordError(f'Expecting string ({key}), got: "{value}"')
    return value


def _read_rocks(value: Any, key: str) -> frozenset[str]:
    """Read a list of rock type labels."""
    if not isinstance(value, list):
        raise RecordError(f'Expecting list of strings ({key}), got: "{value}"')
    return frozenset(_read_string(rock, key) for rock in value)


def profile_from_dict(record: Mapping[str, Any]) -> GeologicalProfile:
    """Build a geological profile from a JSON record.

    Parameters
    ----------
    record : Mapping[str, Any]
        The JSON record.

    Returns
    -------
    GeologicalProfile
        The profile.

    Raises
    ------
    RecordError
        If the record is malformed.
    InvalidConfigurationError
        If the profile values are invalid.
    """
    _check_fields(record, PROFILE_FIELDS, "GeologicalProfile")
    depth_range = _require(record, "depthRange", "GeologicalProfile")
    if not isinstance(depth_range, list) or len(depth_range) != 2:
        raise RecordError(f'Expecting [min, max] (depthRange), got: "{depth_range}"')
    return GeologicalProfile(
        depth_range=tuple(_read_number(depth, "depthRange") for depth in depth_range),
        temperature_threshold=_read_number(
            _require(record, "temperatureThreshold", "GeologicalProfile"),
            "temperatureThreshold",
        ),
        pressure_factor=_read_number(
            _require(record, "pressureFactor", "GeologicalProfile"), "pressureFactor"
        ),
        rock_composition=_read_rocks(
            _require(record, "rockComposition", "GeologicalProfile"), "rockComposition"
        ),
    )


def profile_to_dict(profile: GeologicalProfile) -> dict[str, Any]:
    """Convert a geological profile to a JSON record.

    Parameters
    ----------
    profile : GeologicalProfile
        The profile.

    Returns
    -------
    dict[str, Any]
        The JSON record. Rock types are sorted.
    """
    return {
        "depthRange": list(profile.depth_range),
        "temperatureThreshold": profile.temperature_threshold,
        "pressureFactor": profile.pressure_factor,
        "rockComposition": sorted(profile.rock_composition),
    }


def event_from_dict(record: Mapping[str, Any]) -> SeismicEvent:
    """Build a seismic event from a JSON record.

    Parameters
    ----------
    record : Mapping[str, Any]
        The JSON record.

    Returns
    -------
    SeismicEvent
        The event.

    Raises
    ------
    RecordError
        If the record is malformed.
    InvalidEventError
        If the event measurements are invalid.
    """
    _check_fields(record, EVENT_FIELDS, "SeismicEvent")
    depth = _read_number(_require(record, "depth", "SeismicEvent"), "depth")
    stress_field = None
    if (stress_record := record.get("stressField")) is not None:
        _check_fields(stress_record, STRESS_FIELD_FIELDS, "StressField")
        stress_field = StressField(
            magnitude=_read_number(
                _require(stress_record, "magnitude", "StressField"),
                "stressField.magnitude",
            ),
            direction=_read_string(
                _require(stress_record, "direction", "StressField"),
                "stressField.direction",
            ),
        )
    rocks = record.get("rockComposition")
    return SeismicEvent(
        depth=depth,
        fault_orientation=_read_string(
            _require(record, "faultOrientation", "SeismicEvent"), "faultOrientation"
        ),
        thermal_gradient=_read_number(
            _require(record, "thermalGradient", "SeismicEvent"), "thermalGradient"
        ),
        stress_field=stress_field,
        rock_composition=None if rocks is None else _read_rocks(rocks, "rockComposition"),
        **{
            attribute: _read_optional_number(record, key)
            for key, attribute in OPTIONAL_EVENT_FIELDS
        },
    )


def event_to_dict(event: SeismicEvent) -> dict[str, Any]:
    """Convert a seismic event to a JSON record.

    Parameters
    ----------
    event : SeismicEvent
        The event.

    Returns
    -------
    dict[str, Any]
        The JSON record. Absent optional fields are written as null.
    """
    record: dict[str, Any] = {
        "depth": event.depth,
        "faultOrientation": event.fault_orientation,
        "thermalGradient": event.thermal_gradient,
        "stressField": None,
        "rockComposition": None,
    }
    for key, attribute in OPTIONAL_EVENT_FIELDS:
        record[key] = getattr(event, attribute)
    if event.stress_field is not None:
        record["stressField"] = {
            "magnitude": event.stress_field.magnitude,
            "direction": event.stress_field.direction,
        }
    if event.rock_composition is not None:
        record["rockComposition"] = sorted(event.rock_composition)
    return record


def result_to_dict(result: AnalysisResult) -> dict[str, Any]:
    """Convert an analysis result to a JSON record.

    Parameters
    ----------
    result : AnalysisResult
        The result.

    Returns
    -------
    dict[str, Any]
        The JSON record.
    """
    return {
        "isAnomalous": result.is_anomalous,
        "confidence": result.confidence,
        "indicators": [str(indicator) for indicator in result.indicators],
        "riskLevel": str(result.risk_level),
    }


def result_from_dict(record: Mapping[str, Any]) -> AnalysisResult:
    """Build an analysis result from a JSON record.

    Parameters
    ----------
    record : Mapping[str, Any]
        The JSON record.

    Returns
    -------
    AnalysisResult
        The analysis result.

    Raises
    ------
    RecordError
        If the record is malformed or holds an unknown indicator or risk level.
    """
    _check_fields(record, RESULT_FIELDS, "AnalysisResult")
    is_anomalous = _require(record, "isAnomalous", "AnalysisResult")
    if not isinstance(is_anomalous, bool):
        raise RecordError(f'Expecting boolean (isAnomalous), got: "{is_anomalous}"')
    indicators = _require(record, "indicators", "AnalysisResult")
    if not isinstance(indicators, list):
        raise RecordError(f'Expecting list of strings (indicators), got: "{indicators}"')
    try:
        return AnalysisResult(
            is_anomalous=is_anomalous,
            confidence=_read_number(
                _require(record, "confidence", "AnalysisResult"), "confidence"
            ),
            indicators=tuple(IndicatorName(indicator) for indicator in indicators),
            risk_level=RiskLevel(_require(record, "riskLevel", "AnalysisResult")),
        )
    except ValueError as error:
        if isinstance(error, RecordError):
            raise
        raise RecordError(f"Invalid AnalysisResult: {error}") from error


def _load_json(json_ffp: Path) -> Any:
    """Load a JSON file, raising `RecordError` if it is not valid JSON."""
    with open(json_ffp, "r") as json_file:
        try:
            return json.load(json_file)
        except json.JSONDecodeError as error:
            raise RecordError(f"Invalid JSON in {json_ffp}: {error}") from error


def read_profile(profile_ffp: Path) -> GeologicalProfile:
    """Read a geological profile from a JSON file.

    Parameters
    ----------
    profile_ffp : Path
        The path to the profile file.

    Returns
    -------
    GeologicalProfile
        The profile.

    Raises
    ------
    RecordError
        If the file is not valid JSON or the record is malformed.
    """
    return profile_from_dict(_load_json(profile_ffp))


def read_events(events_ffp: Path) -> list[SeismicEvent]:
    """Read seismic events from a JSON file.

    Parameters
    ----------
    events_ffp : Path
        The path to the events file, containing either a single event
        object or a list of event objects.

    Returns
    -------
    list[SeismicEvent]
        The events, in file order.

    Raises
    ------
    RecordError
        If the file is not valid JSON or any record is malformed.
    """
    records = _load_json(events_ffp)
    if isinstance(records, Mapping):
        records = [records]
    if not isinstance(records, list):
        raise RecordError(f"Expecting event object or list, got: {records!r}")
    return [event_from_dict(record) for record in records]


def write_results(results: Iterable[AnalysisResult], results_ffp: Path) -> None:
    """Write analysis results to a JSON file.

    Parameters
    ----------
    results : Iterable[AnalysisResult]
        The results to write.
    results_ffp : Path
        The output path. Parent directories will be created if they do
        not exist.
    """
    results_ffp = Path(results_ffp)
    results_ffp.parent.mkdir(parents=True, exist_ok=True)
    with open(results_ffp, "w") as results_file:
        json.dump([result_to_dict(result) for result in results], results_file, indent=2)
