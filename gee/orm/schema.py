"""Table schemas derived from dataclass models."""

from __future__ import annotations

import dataclasses
import datetime
from typing import Any, Dict, List, Optional

from gee.orm.dialect import Dialect

TAG_KEY = "geeorm"

_NAMED_TYPES = {
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
    "list": list,
    "List": list,
    "tuple": tuple,
    "Tuple": tuple,
    "datetime": datetime.datetime,
}


@dataclasses.dataclass
class Field:
    """A column: its name, SQL type and constraint text."""

    name: str
    type: str
    tag: str = ""


@dataclasses.dataclass
class Schema:
    """A model class mapped to a table."""

    model: Any
    name: str
    fields: List[Field] = dataclasses.field(default_factory=list)
    field_names: List[str] = dataclasses.field(default_factory=list)
    field_map: Dict[str, Field] = dataclasses.field(default_factory=dict)

    def get_field(self, name: str) -> Optional[Field]:
        """Return the field called ``name``, or None."""
        return self.field_map.get(name)

    def record_values(self, dest: Any) -> List[Any]:
        """Return the column values of ``dest`` in field order."""
        return [getattr(dest, name) for name in self.field_names]


def _resolve_type(annotation: Any) -> Any:
    """Turn a field annotation written as text into the type it names."""
    if not isinstance(annotation, str):
        return annotation
    base = annotation.split("[", 1)[0].strip().rsplit(".", 1)[-1]
    try:
        return _NAMED_TYPES[base]
    except KeyError:
        raise TypeError(f"invalid sql type {annotation}") from None


def parse(dest: Any, dialect: Dialect) -> Schema:
    """Build the schema of a dataclass (class or instance).

    Public fields become columns; a field's ``metadata["geeorm"]`` is
    its constraint text.
    """
    model_type = dest if isinstance(dest, type) else type(dest)
    if not dataclasses.is_dataclass(model_type):
        raise TypeError(f"{model_type.__name__} is not a dataclass model")
    schema = Schema(model=dest, name=model_type.__name__)
    for dc_field in dataclasses.fields(model_type):
        if dc_field.name.startswith("_"):
            continue
        field = Field(
            name=dc_field.name,
            type=dialect.data_type_of(_resolve_type(dc_field.type)),
            tag=dc_field.metadata.get(TAG_KEY, ""),
        )
        schema.fields.append(field)
        schema.field_names.append(field.name)
        schema.field_map[field.name] = field
    return schema