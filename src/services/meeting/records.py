"""Default construction and lenient validation of stage records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from schemas.meeting import StageRecord


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=StageRecord)

_PARSE_ERROR_KEYS = ("parseError", "parse_error")


def default_record(record_type: type[RecordT], **overrides: Any) -> RecordT:
    """Build the stage's fully defaulted record for a recovery failure."""
    return record_type(parse_error=True, **overrides)


def _payload_key(
    record_type: type[StageRecord], payload: Mapping[str, Any], loc_key: str
) -> str | None:
    if loc_key in payload:
        return loc_key
    # Error locations use the camelCase alias; the payload may use field names.
    for name, field in record_type.model_fields.items():
        if field.alias == loc_key and name in payload:
            return name
    return None


def _nested_key(value: Mapping[str, Any], loc_key: object) -> str | None:
    if not isinstance(loc_key, str):
        return None
    for candidate in (loc_key, to_snake(loc_key)):
        if candidate in value:
            return candidate
    return None


def _without(value: Mapping[str, Any], key: str) -> dict[str, Any]:
    return {k: v for k, v in value.items() if k != key}


def _prune_invalid(
    record_type: type[StageRecord], payload: dict[str, Any], exc: ValidationError
) -> bool:
    """Drop whatever the validation errors point at; return True if anything went.

    The narrowest attributable value goes: a key inside a list element or a
    nested object, else the list element itself, else the top-level field so
    its default applies.
    """
    drop_items: dict[str, set[int]] = {}
    drop_fields: set[str] = set()
    changed = False
    for error in exc.errors():
        loc = error.get("loc") or ()
        if not loc or not isinstance(loc[0], str):
            continue
        field = _payload_key(record_type, payload, loc[0])
        if field is None:
            continue
        value = payload[field]

        if len(loc) >= 2 and isinstance(loc[1], int) and isinstance(value, list):
            index = loc[1]
            if index >= len(value):
                continue
            element = value[index]
            key = None
            if len(loc) >= 3 and isinstance(element, Mapping):
                key = _nested_key(element, loc[2])
            if key is None:
                drop_items.setdefault(field, set()).add(index)
            else:
                payload[field] = [
                    _without(item, key) if i == index else item
                    for i, item in enumerate(value)
                ]
                changed = True
        elif len(loc) >= 2 and isinstance(value, Mapping):
            key = _nested_key(value, loc[1])
            if key is None:
                drop_fields.add(field)
            else:
                payload[field] = _without(value, key)
                changed = True
        else:
            drop_fields.add(field)

    for field in drop_fields:
        payload.pop(field, None)
        drop_items.pop(field, None)
    for field, indexes in drop_items.items():
        payload[field] = [
            item for i, item in enumerate(payload[field]) if i not in indexes
        ]
    return changed or bool(drop_fields or drop_items)


def strip_item_keys(
    data: Mapping[str, Any], field: str, keys: Iterable[str]
) -> dict[str, Any]:
    """Copy ``data`` with ``keys`` removed from every object in list ``field``.

    ``field`` and ``keys`` are matched by camelCase alias or snake_case name.
    """
    keys = tuple(keys)
    names = {field, to_snake(field)}
    unwanted = set(keys) | {to_snake(key) for key in keys}
    result = dict(data)
    for name in result.keys() & names:
        items = result[name]
        if isinstance(items, list):
            result[name] = [
                {k: v for k, v in item.items() if k not in unwanted}
                if isinstance(item, Mapping)
                else item
                for item in items
            ]
    return result


def build_record(record_type: type[RecordT], data: Mapping[str, Any]) -> RecordT:
    """Validate recovered data, filling gaps with the schema defaults.

    Missing fields take their declared defaults; values that do not fit the
    schema are discarded (and logged) rather than failing the stage.
    """
    payload = {k: v for k, v in data.items() if k not in _PARSE_ERROR_KEYS}
    while True:
        try:
            return record_type.model_validate(payload)
        except ValidationError as exc:
            logger.warning(
                "%s: discarding %d invalid value(s) from model output",
                record_type.__name__,
                exc.error_count(),
            )
            if not _prune_invalid(record_type, payload, exc):
                # Nothing attributable to a field; keep the defaults only.
                return default_record(record_type)
