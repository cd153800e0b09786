# errors.py - failures a knowledge graph lookup can end in

from typing import Optional


class SearchError(Exception):
    """Base class: carries the HTTP status the proxy answers with."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(SearchError):
    http_status = 400


class ConfigurationError(SearchError):
    http_status = 500


class UpstreamError(SearchError):
    """The search API answered with a non-success status or was unreachable."""

    http_status = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedUpstreamResponse(SearchError):
    """The search API answered 2xx but the body was not the JSON we expect."""

    http_status = 500


class Unauthorized(SearchError):
    http_status = 401
