# restprovider/request_builder.py
"""
Maps data-access operations to HTTP requests for the REST dialect.

    list                => GET    {api}/posts?limit=..&page=..&query={..}&skip=..&sort={"title":1}
    get-one             => GET    {api}/posts/123
    get-many            => GET    {api}/posts?filter={"id":[123,456]}
    get-many-reference  => GET    {api}/comments?limit=..&query={"post_id":123}&skip=..&sort={..}
    create              => POST   {api}/posts
    update              => PUT    {api}/posts/123
    delete              => DELETE {api}/posts/123
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Union
from urllib.parse import quote

from .exceptions import UnsupportedOperationError
from .operations import (
    BATCH_OPERATIONS,
    GetManyReferenceParams,
    ListParams,
    OperationType,
    RequestParams,
    Sort,
    coerce_params,
)

FULL_TEXT_KEY = "$text"


@dataclass(frozen=True)
class HttpRequest:
    url: str
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def method(self) -> str:
        return self.options.get("method", "GET")


def to_json(value: Any) -> str:
    """Compact JSON, matching what the dialect server expects in query values"""
    return json.dumps(value, separators=(",", ":"))


def stringify(query: Mapping[str, Any]) -> str:
    """Serialize a query mapping with sorted keys and strict percent-encoding"""
    return "&".join(
        f"{quote(str(key), safe='')}={quote(str(value), safe='')}"
        for key, value in sorted(query.items())
    )


def fold_full_text(filter_: Mapping[str, Any], full_text_key: str = FULL_TEXT_KEY) -> Dict[str, Any]:
    """Return a new filter with the generic `q` term rewritten as a full-text clause"""
    folded = {key: value for key, value in filter_.items() if key != "q"}
    if filter_.get("q"):
        folded[full_text_key] = {"$search": filter_["q"]}
    return folded


def list_sort(sort: Sort) -> str:
    # Sorting on the identifier means natural order for the dialect
    if sort.field == "id":
        return "{}"
    return to_json({sort.field: 1 if sort.ascending else -1})


def reference_sort(sort: Sort) -> str:
    # Reference lists use 0/1 rather than 1/-1
    return to_json({sort.field: 0 if sort.ascending else 1})


def _list_query(params: ListParams, full_text_key: str) -> Dict[str, Any]:
    return {
        "sort": list_sort(params.sort),
        "skip": params.pagination.skip,
        "page": params.pagination.page,
        "limit": params.pagination.per_page,
        "query": to_json(fold_full_text(params.filter, full_text_key)),
    }


def _reference_query(params: GetManyReferenceParams) -> Dict[str, Any]:
    return {
        "sort": reference_sort(params.sort),
        "skip": params.pagination.skip,
        "limit": params.pagination.per_page,
        "query": to_json({**params.filter, params.target: params.id}),
    }


def build_request(
    api_url: str,
    operation: Union[OperationType, str],
    resource: str,
    params: Union[RequestParams, Mapping, None],
    full_text_key: str = FULL_TEXT_KEY,
) -> HttpRequest:
    """
    Build the HTTP request for a single operation.
    Batch operations are fanned out by the provider and are rejected here.
    """
    operation = OperationType.parse(operation)
    if operation in BATCH_OPERATIONS:
        raise UnsupportedOperationError(operation.value)
    params = coerce_params(operation, params)

    base = f"{api_url}/{resource}"

    if operation is OperationType.LIST:
        return HttpRequest(f"{base}?{stringify(_list_query(params, full_text_key))}")
    elif operation is OperationType.GET_ONE:
        return HttpRequest(f"{base}/{params.id}")
    elif operation is OperationType.GET_MANY:
        return HttpRequest(f"{base}?{stringify({'filter': to_json({'id': list(params.ids)})})}")
    elif operation is OperationType.GET_MANY_REFERENCE:
        return HttpRequest(f"{base}?{stringify(_reference_query(params))}")
    elif operation is OperationType.CREATE:
        return HttpRequest(base, {"method": "POST", "data": to_json(params.data)})
    elif operation is OperationType.UPDATE:
        # Body is passed through as-is; the transport serializes it
        return HttpRequest(f"{base}/{params.id}", {"method": "PUT", "data": params.data})
    elif operation is OperationType.DELETE:
        return HttpRequest(f"{base}/{params.id}", {"method": "DELETE"})
    raise UnsupportedOperationError(operation.value)
