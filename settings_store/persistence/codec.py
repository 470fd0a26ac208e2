import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import PurePath
from typing import Any, Optional, Protocol, get_origin


# ==============================================
# Codec
# ==============================================
#
# PURPOSE:
#   Turn setting values into the strings stored in the Value
#   column, and back again into the type the caller asks for.
#
# CONTRACT:
#   - encode(value) -> str
#   - decode(text, value_type=None) -> value
#       Raises ValueError / TypeError when the text cannot be
#       turned into `value_type`.
#   - None never reaches a codec: the manager stores it as "".
#
# JsonCodec follows the same to_dict() / from_dict() convention
# as the rest of the package's data classes.
# ==============================================

ZERO_VALUE_TYPES = (str, int, float, bool, list, dict, tuple, set, frozenset, Decimal)


class Codec(Protocol):
    def encode(self, value: Any) -> str:
        ...

    def decode(self, text: str, value_type: Optional[type] = None) -> Any:
        ...


def zero_value(value_type: Optional[type]) -> Any:
    """
    The empty value of a type, used when a missing setting has no default.

    str -> "", int -> 0, list -> [] ... and None for everything else.
    """
    origin = get_origin(value_type) or value_type
    if origin in ZERO_VALUE_TYPES:
        return origin()
    return None


def _to_jsonable(value: Any) -> Any:
    """json.dumps default hook for values JSON does not know natively."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    if isinstance(value, PurePath):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not serializable as a setting")


def _require_string_keys(value: Any) -> None:
    """
    Reject mappings with non-str keys anywhere inside `value`.

    json.dumps would quietly turn {1: "a"} into {"1": "a"}, which does not
    read back as the value that was saved.
    """
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(
                    f"Mapping key {key!r} of type {type(key).__name__} is not serializable as a setting"
                )
            _require_string_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _require_string_keys(item)


def _to_checked_jsonable(value: Any) -> Any:
    converted = _to_jsonable(value)
    _require_string_keys(converted)
    return converted


class JsonCodec:
    """
    JSON codec for setting values.

    Supported on encode: JSON natives, Decimal, datetime/date, Enum,
    sets, paths, dataclasses and any object with a to_dict() method.
    Mapping keys must be strings.
    On decode the same types are rebuilt when `value_type` names them.
    """

    def __init__(self, ensure_ascii: bool = False):
        self.ensure_ascii = ensure_ascii

    def encode(self, value: Any) -> str:
        _require_string_keys(value)
        return json.dumps(value, default=_to_checked_jsonable, ensure_ascii=self.ensure_ascii)

    def decode(self, text: str, value_type: Optional[type] = None) -> Any:
        data = json.loads(text)
        if value_type is None or value_type is Any:
            return data
        return self._coerce(data, value_type)

    def _coerce(self, data: Any, value_type: Any) -> Any:
        from_dict = getattr(value_type, "from_dict", None)
        if callable(from_dict):
            return from_dict(data)

        if is_dataclass(value_type):
            if not isinstance(data, dict):
                raise TypeError(f"Expected an object for {value_type.__name__}, got {data!r}")
            return value_type(**data)

        origin = get_origin(value_type)
        if isinstance(origin, type):
            # list[int], dict[str, Any] ... only the container is checked
            value_type = origin

        if isinstance(value_type, type) and issubclass(value_type, Enum):
            return value_type(data)

        if value_type is Decimal:
            try:
                return Decimal(str(data))
            except InvalidOperation as exc:
                raise ValueError(f"{data!r} is not a decimal") from exc

        # datetime before date: datetime is a date subclass
        if value_type is datetime:
            return datetime.fromisoformat(data)
        if value_type is date:
            return date.fromisoformat(data)

        if value_type in (tuple, set, frozenset):
            if not isinstance(data, list):
                raise TypeError(f"Expected a list for {value_type.__name__}, got {data!r}")
            return value_type(data)

        if value_type is float and isinstance(data, int) and not isinstance(data, bool):
            return float(data)

        if isinstance(data, value_type):
            return data

        name = getattr(value_type, "__name__", repr(value_type))
        raise TypeError(f"Stored value {data!r} is not a {name}")
