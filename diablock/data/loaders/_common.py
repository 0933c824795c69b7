"""Shared JSON table reading for the data loaders."""

import json
import logging
from pathlib import Path
from typing import Callable, TypeVar

from pydantic import ValidationError

logger = logging.getLogger(__name__)

# Get the data directory path
DATA_DIR = Path(__file__).parent.parent / "json"

T = TypeVar("T")


def read_table(path: Path, key: str, parse: Callable[[dict], T]) -> list[T]:
    """Read a list of records from a JSON table.

    A missing or unreadable file yields an empty list. Entries that fail
    validation are skipped.

    Args:
        path: JSON file to read.
        key: Top-level key holding the list of records.
        parse: Converts one raw record into a model.

    Returns:
        Parsed records in file order.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("Content table %s not found, using empty table", path)
        return []
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Content table %s unreadable (%s), using empty table", path, e)
        return []

    records = data.get(key, []) if isinstance(data, dict) else []
    parsed = []
    for raw in records:
        try:
            parsed.append(parse(raw))
        except (ValidationError, TypeError, KeyError) as e:
            logger.warning("Skipping malformed entry in %s: %s", path.name, e)
    return parsed
