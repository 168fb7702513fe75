# restprovider/response_normalizer.py
import math
import re
from typing import Any, Dict, Mapping, Union

from .operations import OperationType

TOTAL_COUNT_HEADER = "x-total-count"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

LIST_OPERATIONS = frozenset({
    OperationType.LIST,
    OperationType.GET_MANY,
    OperationType.GET_MANY_REFERENCE,
})
DELETE_OPERATIONS = frozenset({OperationType.DELETE, OperationType.DELETE_MANY})


def rename_identifier(record: Any) -> Any:
    """Return a copy of a wire record with `_id` exposed as `id`"""
    if not isinstance(record, Mapping) or "_id" not in record:
        return record
    renamed = {key: value for key, value in record.items() if key not in ("_id", "id")}
    return {"id": record["_id"], **renamed}


def _header(headers: Mapping, name: str) -> Any:
    if not headers:
        return None
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if str(key).lower() == lowered:
            return value
    return None


def parse_total(headers: Mapping, header_name: str = TOTAL_COUNT_HEADER) -> Union[int, float]:
    """
    Read the total count header the way a lenient integer parse would:
    leading integer prefix wins, anything else is NaN.
    """
    raw = _header(headers, header_name)
    if raw is None:
        return math.nan
    match = _LEADING_INT.match(str(raw))
    if not match:
        return math.nan
    return int(match.group(1))


def normalize_response(
    response: Mapping,
    operation: Union[OperationType, str],
    resource: str,
    params: Any,
    total_count_header: str = TOTAL_COUNT_HEADER,
) -> Dict[str, Any]:
    operation = OperationType.parse(operation)
    headers = response.get("headers") or {}
    data = response.get("data")

    if operation in LIST_OPERATIONS:
        return {
            "data": [rename_identifier(item) for item in data or []],
            "total": parse_total(headers, total_count_header),
        }
    if operation in DELETE_OPERATIONS:
        # The dialect returns nothing useful on delete
        return {"data": params}
    return {"data": rename_identifier(data)}
