# restprovider/__init__.py
from .operations import OperationType, parse_params
from .request_builder import HttpRequest, build_request
from .response_normalizer import normalize_response, rename_identifier
from .provider import DataProvider, data_provider
from .exceptions import DataProviderError, UnsupportedOperationError, InvalidParamsError, TransportError

__version__ = "0.1.0"
__all__ = [
    "OperationType",
    "parse_params",
    "HttpRequest",
    "build_request",
    "normalize_response",
    "rename_identifier",
    "DataProvider",
    "data_provider",
    "DataProviderError",
    "UnsupportedOperationError",
    "InvalidParamsError",
    "TransportError",
]
