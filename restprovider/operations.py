# restprovider/operations.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .exceptions import InvalidParamsError, UnsupportedOperationError


class OperationType(str, Enum):
    LIST = "list"
    GET_ONE = "get-one"
    GET_MANY = "get-many"
    GET_MANY_REFERENCE = "get-many-reference"
    CREATE = "create"
    UPDATE = "update"
    UPDATE_MANY = "update-many"
    DELETE = "delete"
    DELETE_MANY = "delete-many"

    @classmethod
    def parse(cls, value: Union["OperationType", str]) -> "OperationType":
        """
        Resolve an operation type from the enum itself, its value ("get-one")
        or the caller framework constant ("GET_ONE", "GET_LIST").
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
            name = "LIST" if value == "GET_LIST" else value
            if name in cls.__members__:
                return cls.__members__[name]
        raise UnsupportedOperationError(value)


BATCH_OPERATIONS = frozenset({OperationType.UPDATE_MANY, OperationType.DELETE_MANY})


@dataclass(frozen=True)
class Pagination:
    page: int
    per_page: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True)
class Sort:
    field: str
    order: str

    @property
    def ascending(self) -> bool:
        return self.order == "ASC"


@dataclass(frozen=True)
class ListParams:
    pagination: Pagination
    sort: Sort
    filter: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GetOneParams:
    id: Any


@dataclass(frozen=True)
class GetManyParams:
    ids: Tuple[Any, ...]


@dataclass(frozen=True)
class GetManyReferenceParams:
    target: str
    id: Any
    pagination: Pagination
    sort: Sort
    filter: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CreateParams:
    data: Any


@dataclass(frozen=True)
class UpdateParams:
    id: Any
    data: Any


@dataclass(frozen=True)
class UpdateManyParams:
    ids: Tuple[Any, ...]
    data: Any


@dataclass(frozen=True)
class DeleteParams:
    id: Any


@dataclass(frozen=True)
class DeleteManyParams:
    ids: Tuple[Any, ...]


RequestParams = Union[
    ListParams, GetOneParams, GetManyParams, GetManyReferenceParams,
    CreateParams, UpdateParams, UpdateManyParams, DeleteParams, DeleteManyParams,
]


def _require(params: Mapping, key: str, operation: OperationType) -> Any:
    if key not in params or params[key] is None:
        raise InvalidParamsError(f"{operation.value} requires '{key}' in params")
    return params[key]


def _pagination(params: Mapping, operation: OperationType) -> Pagination:
    raw = _require(params, "pagination", operation)
    per_page = raw.get("perPage", raw.get("per_page"))
    if raw.get("page") is None or per_page is None:
        raise InvalidParamsError(f"{operation.value} pagination requires 'page' and 'perPage'")
    try:
        return Pagination(page=int(raw["page"]), per_page=int(per_page))
    except (TypeError, ValueError):
        raise InvalidParamsError(
            f"{operation.value} pagination values must be integers, got page={raw['page']!r} perPage={per_page!r}"
        ) from None


def _sort(params: Mapping, operation: OperationType) -> Sort:
    raw = _require(params, "sort", operation)
    order = raw.get("order")
    if order not in ("ASC", "DESC"):
        raise InvalidParamsError(f"{operation.value} sort order must be ASC or DESC, got {order!r}")
    return Sort(field=_require(raw, "field", operation), order=order)


def _filter(params: Mapping) -> Dict[str, Any]:
    return dict(params.get("filter") or {})


def _ids(params: Mapping, operation: OperationType) -> Tuple[Any, ...]:
    return tuple(_require(params, "ids", operation))


def parse_params(operation: Union[OperationType, str], params: Optional[Mapping]) -> RequestParams:
    """Build the typed params variant for an operation from the caller's mapping"""
    operation = OperationType.parse(operation)
    params = params or {}

    if operation is OperationType.LIST:
        return ListParams(
            pagination=_pagination(params, operation),
            sort=_sort(params, operation),
            filter=_filter(params),
        )
    elif operation is OperationType.GET_ONE:
        return GetOneParams(id=_require(params, "id", operation))
    elif operation is OperationType.GET_MANY:
        return GetManyParams(ids=_ids(params, operation))
    elif operation is OperationType.GET_MANY_REFERENCE:
        return GetManyReferenceParams(
            target=_require(params, "target", operation),
            id=_require(params, "id", operation),
            pagination=_pagination(params, operation),
            sort=_sort(params, operation),
            filter=_filter(params),
        )
    elif operation is OperationType.CREATE:
        return CreateParams(data=_require(params, "data", operation))
    elif operation is OperationType.UPDATE:
        return UpdateParams(id=_require(params, "id", operation), data=_require(params, "data", operation))
    elif operation is OperationType.UPDATE_MANY:
        return UpdateManyParams(ids=_ids(params, operation), data=_require(params, "data", operation))
    elif operation is OperationType.DELETE:
        return DeleteParams(id=_require(params, "id", operation))
    elif operation is OperationType.DELETE_MANY:
        return DeleteManyParams(ids=_ids(params, operation))
    raise UnsupportedOperationError(operation.value)


PARAMS_TYPES = {
    OperationType.LIST: ListParams,
    OperationType.GET_ONE: GetOneParams,
    OperationType.GET_MANY: GetManyParams,
    OperationType.GET_MANY_REFERENCE: GetManyReferenceParams,
    OperationType.CREATE: CreateParams,
    OperationType.UPDATE: UpdateParams,
    OperationType.UPDATE_MANY: UpdateManyParams,
    OperationType.DELETE: DeleteParams,
    OperationType.DELETE_MANY: DeleteManyParams,
}


def coerce_params(operation: OperationType, params: Union[RequestParams, Mapping, None]) -> RequestParams:
    """Accept either a caller mapping or an already-typed variant for the operation"""
    expected = PARAMS_TYPES[operation]
    if isinstance(params, expected):
        return params
    if params is None or isinstance(params, Mapping):
        return parse_params(operation, params)
    raise InvalidParamsError(
        f"{operation.value} expects {expected.__name__}, got {type(params).__name__}"
    )
