"""
JSON payload construction.
Turns a validated batch of records into the JSON array the API expects.
"""
import dataclasses
import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from pydantic import BaseModel


class RecordEncoder(json.JSONEncoder):
    """JSON encoder for the date-time and GUID field types."""
    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, UUID):
            return str(o)
        return super().default(o)


def record_to_dict(record: Any) -> Dict[str, Any]:
    """
    Field names and values of ``record``, in declaration order. Values are
    left as Python objects so every record kind goes through RecordEncoder.
    """
    if isinstance(record, BaseModel):
        return record.model_dump()
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return {field.name: getattr(record, field.name) for field in dataclasses.fields(record)}
    if isinstance(record, Mapping):
        return dict(record)
    return {name: value for name, value in vars(record).items() if not name.startswith("_")}


def to_payload(records: List[Any]) -> str:
    return json.dumps([record_to_dict(r) for r in records], cls=RecordEncoder, ensure_ascii=False, allow_nan=False)
