from typing import Dict, NoReturn

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    """Business failure the caller can act on, rendered with its own message"""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    """Unexpected failure, rendered as a generic 500"""

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error, status_by_code: Dict[str, int]) -> NoReturn:
    """Raise ClientError for a mapped error code, ServerError otherwise"""
    status_code = status_by_code.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
