# restprovider/adapters/__init__.py
from .rest_adapter import RESTAdapter, Transport

__all__ = [
    "RESTAdapter",
    "Transport",
]
