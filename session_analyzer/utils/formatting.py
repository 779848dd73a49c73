"""
Formatting helpers for aggregation pipelines and result sets.
"""
import json
from datetime import date, datetime
from typing import Any, Dict, List

from bson import ObjectId
from bson.decimal128 import Decimal128


def _json_default(value: Any) -> Any:
    """Fallback for BSON types the json module does not know about."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    return str(value)


def to_json(data: Any, indent: int = 2) -> str:
    """Serialize a pipeline or result set for prompts and logs."""
    return json.dumps(data, indent=indent, default=_json_default, ensure_ascii=False)


def to_jsonable(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert a result set into plain JSON types for the HTTP response."""
    return json.loads(json.dumps(results, default=_json_default))


def truncate_results(results: List[Dict[str, Any]], full_limit: int, truncated_size: int) -> List[Dict[str, Any]]:
    """Return all results up to ``full_limit`` records, otherwise only the first ``truncated_size``."""
    if len(results) <= full_limit:
        return list(results)
    return list(results[:truncated_size])
