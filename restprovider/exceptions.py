# restprovider/exceptions.py

class DataProviderError(Exception):
    """Base exception for restprovider operations"""
    pass

class UnsupportedOperationError(DataProviderError, ValueError):
    """Raised when an operation type is not handled by the dialect"""
    def __init__(self, operation):
        self.operation = operation
        super().__init__(f"Unsupported fetch action type {operation}")

class InvalidParamsError(DataProviderError, ValueError):
    """Raised when request params are missing a field the operation needs"""
    pass

class TransportError(DataProviderError):
    """Raised by the HTTP transport on network failure or non-2xx status"""
    def __init__(self, message: str, status_code: int = None, url: str = None, body: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body
