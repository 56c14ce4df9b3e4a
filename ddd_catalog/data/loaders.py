"""
DDD Catalog - Data Loaders

Reads raw marker occurrences written by a source scanner and writes build
results for downstream tooling.

Accepted input shapes:
    [ {occurrence}, ... ]
    {"occurrences": [ {occurrence}, ... ]}
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Union

from ddd_catalog.core.errors import MalformedOccurrenceError
from ddd_catalog.domain.records import RawOccurrence


def parse_occurrences(data: Any) -> List[RawOccurrence]:
    """Convert decoded JSON into raw occurrences."""
    if isinstance(data, dict):
        data = data.get("occurrences")
    if not isinstance(data, list):
        raise MalformedOccurrenceError(
            "Expected a list of occurrences or an object with an 'occurrences' list",
            field_name="occurrences",
        )
    return [RawOccurrence.from_dict(item) for item in data]


def load_occurrences(path: Union[str, Path]) -> List[RawOccurrence]:
    """
    Load raw occurrences from a JSON file.

    Raises:
        FileNotFoundError: if the file does not exist
        MalformedOccurrenceError: if the file cannot be read as UTF-8 occurrence JSON
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as e:
        raise MalformedOccurrenceError(f"{path} is not valid JSON: {e}", cause=e) from e
    except (UnicodeDecodeError, OSError) as e:
        raise MalformedOccurrenceError(f"Cannot read occurrences from {path}: {e}", cause=e) from e
    return parse_occurrences(data)


def save_result(result: Any, path: Union[str, Path], indent: int = 2) -> Path:
    """Write ``result.to_dict()`` as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload: Dict[str, Any] = result.to_dict()
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=indent)
    return path
