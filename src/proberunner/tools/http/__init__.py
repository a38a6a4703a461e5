"""HTTP helpers for proberunner."""

from .client import HTTPClient, HTTPResponse, HTTPTransport

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "HTTPTransport",
]
