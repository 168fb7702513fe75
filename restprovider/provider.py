# restprovider/provider.py
import asyncio
import logging
from typing import Any, Dict, Mapping, Union

from .adapters.rest_adapter import RESTAdapter, Transport
from .operations import BATCH_OPERATIONS, OperationType, RequestParams, coerce_params
from .request_builder import FULL_TEXT_KEY, build_request
from .response_normalizer import TOTAL_COUNT_HEADER, normalize_response, rename_identifier

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "total_count_header": TOTAL_COUNT_HEADER,
    "full_text_key": FULL_TEXT_KEY,
    "log_requests": True,
}


class DataProvider:
    """
    Translates data-access operations into calls on the REST dialect.
    Each call is independent: no state is kept between dispatches.

    The dialect has no bulk update or delete route, so update-many and
    delete-many are sent as one request per id, all in flight together.
    If any of them fails the whole call fails; requests that already
    succeeded are not rolled back.
    """
    def __init__(self, api_url: str, transport: Transport, config: Dict = None):
        self.api_url = api_url.rstrip("/")
        self.transport = transport
        self.config = {**DEFAULT_CONFIG, **(config or {})}

    async def __call__(self, operation: Union[OperationType, str], resource: str,
                       params: Union[RequestParams, Mapping, None] = None) -> Dict[str, Any]:
        return await self.dispatch(operation, resource, params)

    async def dispatch(self, operation: Union[OperationType, str], resource: str,
                       params: Union[RequestParams, Mapping, None] = None) -> Dict[str, Any]:
        operation = OperationType.parse(operation)
        typed = coerce_params(operation, params)

        if operation in BATCH_OPERATIONS:
            return await self._fan_out(operation, resource, typed)

        request = build_request(
            self.api_url, operation, resource, typed,
            full_text_key=self.config["full_text_key"],
        )
        if self.config["log_requests"]:
            logger.debug("%s %s (%s %s)", request.method, request.url, operation.value, resource)

        response = await self.transport(request.url, request.options)
        return normalize_response(
            response, operation, resource, params,
            total_count_header=self.config["total_count_header"],
        )

    async def _fan_out(self, operation: OperationType, resource: str, params: RequestParams) -> Dict[str, Any]:
        if operation is OperationType.UPDATE_MANY:
            options = {"method": "PUT", "data": params.data}
        else:
            options = {"method": "DELETE"}

        if self.config["log_requests"]:
            logger.debug("%s x%d on %s (%s)", options["method"], len(params.ids), resource, operation.value)

        calls = [
            self.transport(f"{self.api_url}/{resource}/{record_id}", dict(options))
            for record_id in params.ids
        ]
        # Every request settles before the aggregate is judged
        responses = await asyncio.gather(*calls, return_exceptions=True)
        failures = [response for response in responses if isinstance(response, BaseException)]
        if failures:
            logger.warning("%s on %s failed for %d of %d ids; completed requests are not rolled back",
                           operation.value, resource, len(failures), len(params.ids))
            raise failures[0]

        return {"data": [rename_identifier(response.get("data")) for response in responses]}

    async def get_list(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.LIST, resource, params)

    async def get_one(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.GET_ONE, resource, params)

    async def get_many(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.GET_MANY, resource, params)

    async def get_many_reference(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.GET_MANY_REFERENCE, resource, params)

    async def create(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.CREATE, resource, params)

    async def update(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.UPDATE, resource, params)

    async def update_many(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.UPDATE_MANY, resource, params)

    async def delete(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.DELETE, resource, params)

    async def delete_many(self, resource: str, params: Mapping) -> Dict[str, Any]:
        return await self.dispatch(OperationType.DELETE_MANY, resource, params)


def data_provider(api_url: str, transport: Transport = None, config: Dict = None) -> DataProvider:
    """Build a provider for `api_url`, defaulting to a requests-backed transport"""
    if transport is None:
        transport = RESTAdapter((config or {}).get("transport"))
    return DataProvider(api_url, transport, config)
