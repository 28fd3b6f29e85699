"""
Query string helpers for list and search endpoints.
"""

import enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

QueryParams = List[Tuple[str, str]]


def format_query_value(value: Any) -> str:
    """
    Render a single filter value the way the server parses it.

    Enums become their value, booleans are lowercase and floats with an
    integral value lose the trailing ``.0``.
    """
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_query_params(filters: Optional[Union[BaseModel, Mapping[str, Any]]]) -> QueryParams:
    """
    Turn a filter object into ordered query parameters.

    Every present field is serialized; absent (None) fields are omitted
    entirely, never sent as an empty string or ``null``.

    Args:
        filters: Pydantic filter model or plain mapping

    Returns:
        List of (name, value) pairs in field order
    """
    if filters is None:
        return []

    if isinstance(filters, BaseModel):
        items: Dict[str, Any] = filters.model_dump(exclude_none=True)
    else:
        items = dict(filters)

    params: QueryParams = []
    for key, value in items.items():
        if value is None:
            continue
        params.append((key, format_query_value(value)))
    return params
