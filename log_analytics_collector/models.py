"""
Record validation for the HTTP Data Collector API.

The API only accepts flat records whose properties are strings, booleans,
doubles, date-times or GUIDs. Records may be ``LogRecord`` subclasses,
dataclasses, plain mappings or simple objects; their fields are discovered by
reflection and checked before anything is serialized or sent.
"""
from __future__ import annotations

import dataclasses
import logging
import math
import re
import types
import typing
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .config import MAX_LOG_TYPE_LENGTH
from .exceptions import InvalidArgumentError, NullInputError

log = logging.getLogger(__name__)

# String, Boolean, Double, DateTime, Guid
ALLOWED_FIELD_TYPES: Tuple[type, ...] = (str, bool, float, datetime, UUID)
ALLOWED_FIELD_TYPE_NAMES = ", ".join(t.__name__ for t in ALLOWED_FIELD_TYPES)

LOG_TYPE_PATTERN = re.compile(r"[A-Za-z]+")

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)


class LogRecord(BaseModel):
    """
    Base class for typed log records.

    Subclasses may only declare fields of the permitted types (optionally
    ``Optional[...]``); any other declaration fails when the class is created.
    """
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        for name, field in cls.model_fields.items():
            if not is_allowed_annotation(field.annotation):
                raise InvalidArgumentError(
                    _field_type_message(name, _type_name(field.annotation), cls.__qualname__),
                    argument=name,
                    value=field.annotation,
                )


def is_allowed_annotation(annotation: Any) -> bool:
    if annotation in ALLOWED_FIELD_TYPES:
        return True
    if typing.get_origin(annotation) in _UNION_TYPES:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        return len(args) == 1 and args[0] in ALLOWED_FIELD_TYPES
    return False


def is_allowed_value(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return True
    if isinstance(value, int):
        # int is not a double on the wire
        return False
    return isinstance(value, ALLOWED_FIELD_TYPES)


def validate_log_type(log_type: Optional[str]) -> str:
    """Log-Type: letters only, at most 100 characters."""
    if log_type is None:
        raise NullInputError("parameter 'log_type' cannot be None")
    if not isinstance(log_type, str):
        raise InvalidArgumentError(
            f"log_type must be a string, got {type(log_type).__name__}",
            argument="log_type",
            value=log_type,
        )
    if len(log_type) > MAX_LOG_TYPE_LENGTH:
        raise InvalidArgumentError(
            f"log_type is {len(log_type)} characters long; "
            f"the size limit for this parameter is {MAX_LOG_TYPE_LENGTH} characters.",
            argument="log_type",
            value=log_type,
        )
    if not LOG_TYPE_PATTERN.fullmatch(log_type):
        raise InvalidArgumentError(
            f"log_type '{log_type}' (length {len(log_type)}) can only contain alpha characters. "
            "It does not support numerics or special characters.",
            argument="log_type",
            value=log_type,
        )
    return log_type


def _declared_types(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        log.debug(f"Could not resolve annotations of {cls.__qualname__}, checking values only: {e}")
        return {}


def record_fields(record: Any) -> Iterator[Tuple[str, Any, Any]]:
    """
    Yields ``(name, declared_type, value)`` for every public field of
    ``record``. ``declared_type`` is None when the record carries no
    annotation for the field (mappings, untyped attributes).
    """
    if isinstance(record, BaseModel):
        # model_dump also carries extra and computed fields, which are sent too
        declared = type(record).model_fields
        for name, value in record.model_dump().items():
            field = declared.get(name)
            yield name, field.annotation if field is not None else None, value
    elif dataclasses.is_dataclass(record) and not isinstance(record, type):
        hints = _declared_types(type(record))
        for field in dataclasses.fields(record):
            yield field.name, hints.get(field.name), getattr(record, field.name)
    elif isinstance(record, Mapping):
        for name, value in record.items():
            if not isinstance(name, str):
                raise InvalidArgumentError(
                    f"Field names must be strings; record of type '{type(record).__qualname__}' "
                    f"has a key of type '{type(name).__name__}'.",
                    argument=repr(name),
                    value=name,
                )
            yield name, None, value
    elif hasattr(record, "__dict__") and not isinstance(record, (type, *ALLOWED_FIELD_TYPES)):
        hints = _declared_types(type(record))
        for name, value in vars(record).items():
            if not name.startswith("_"):
                yield name, hints.get(name), value
    else:
        raise InvalidArgumentError(
            f"Record of type '{type(record).__qualname__}' has no fields to send; "
            "use a LogRecord, a dataclass, a mapping or an object with attributes.",
            argument="record",
            value=record,
        )


def validate_record(record: Any) -> Any:
    if record is None:
        raise NullInputError("parameter 'record' cannot be None")
    record_type = type(record).__qualname__
    for name, declared, value in record_fields(record):
        if declared is not None and not is_allowed_annotation(declared):
            raise InvalidArgumentError(
                _field_type_message(name, _type_name(declared), record_type),
                argument=name,
                value=value,
            )
        if not is_allowed_value(value):
            raise InvalidArgumentError(
                _field_type_message(name, type(value).__name__, record_type),
                argument=name,
                value=value,
            )
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidArgumentError(
                f"Property '{name}' of record with type '{record_type}' holds {value!r}; "
                "NaN and infinite doubles cannot be represented in JSON.",
                argument=name,
                value=value,
            )
    return record


def validate_records(records: Any) -> List[Any]:
    """Validates a batch and returns it as a list."""
    if records is None:
        raise NullInputError("parameter 'records' cannot be None")
    if isinstance(records, (str, bytes, Mapping, BaseModel)) or not isinstance(records, Iterable):
        raise InvalidArgumentError(
            f"records must be a sequence of records, got {type(records).__name__}; "
            "use send_log_entry for a single record.",
            argument="records",
            value=records,
        )
    batch = list(records)
    for record in batch:
        validate_record(record)
    return batch


def _type_name(annotation: Any) -> str:
    return annotation.__name__ if isinstance(annotation, type) else repr(annotation)


def _field_type_message(name: str, type_name: str, record_type: str) -> str:
    return (
        f"Property '{name}' of record with type '{record_type}' has type '{type_name}', "
        f"which is not one of the valid types. Valid types are {ALLOWED_FIELD_TYPE_NAMES}."
    )


def validate_time_generated_field(records: List[Any], field_name: str) -> str:
    """
    The field named in the ``time-generated-field`` header must exist in every
    record and hold a date-time.
    """
    if not isinstance(field_name, str) or not field_name:
        raise InvalidArgumentError(
            "time_generated_field must be a non-empty field name",
            argument="time_generated_field",
            value=field_name,
        )
    for record in records:
        values = {name: value for name, _, value in record_fields(record)}
        if field_name not in values:
            raise InvalidArgumentError(
                f"time_generated_field '{field_name}' is missing from record of type "
                f"'{type(record).__qualname__}'.",
                argument="time_generated_field",
                value=field_name,
            )
        if not isinstance(values[field_name], datetime):
            raise InvalidArgumentError(
                f"time_generated_field '{field_name}' of record with type '{type(record).__qualname__}' "
                f"has type '{type(values[field_name]).__name__}'; it must be a datetime.",
                argument="time_generated_field",
                value=field_name,
            )
    return field_name
