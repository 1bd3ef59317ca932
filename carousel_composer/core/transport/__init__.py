"""
Transport Module
===============

Loading and dumping of composition requests.
"""

from .loader import (
    RequestLoaderFactory,
    TransportLoadError,
    dump_request,
    load_request,
    load_request_file,
)

__all__ = [
    "RequestLoaderFactory",
    "TransportLoadError",
    "dump_request",
    "load_request",
    "load_request_file",
]
