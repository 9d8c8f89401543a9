"""Utility functions for JSON handling, ids and dates."""

import json
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('society.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate each record against

    Returns:
        Parsed JSON (a list of validated models if schema provided and the
        file holds a list)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        players = load_json('data/players.json')

        from society.schemas import Player
        players = load_json('data/players.json', schema=Player)
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema:
        try:
            if isinstance(data, list):
                return [schema.model_validate(item) for item in data]
            return schema.model_validate(data)
        except ValidationError as e:
            logger.error(f'Schema validation failed for {path}: {e}')
            raise ValueError(f'Schema validation failed for {path}:\n{e}') from e

    return data


def dump_json(data: Any, indent: int = 2) -> str:
    """Serialize data the way the society data files are written."""
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return json.dumps(data, indent=indent, ensure_ascii=False)
    except TypeError as e:
        raise TypeError(f'Data is not JSON-serializable: {e}') from e


def today_iso() -> str:
    """Today's date as YYYY-MM-DD."""
    return date.today().isoformat()


def new_id(prefix: str, *parts: str) -> str:
    """
    Generate a unique record id.

    Example:
        new_id('txn', 'p_1', 'entry')  # 'txn_3f9c2a1b_p_1_entry'
    """
    token = uuid.uuid4().hex[:8]
    return '_'.join([prefix, token, *[p for p in parts if p]])
