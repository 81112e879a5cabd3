from .core import (
    Resolve,
    add_container_to_app,
    get_root_scope_from_app,
    get_scope,
)
from .dependencies import (
    RequestHeaderReader,
    ResponseHeaderWriter,
    add_request_header_reader_to_scope,
    add_request_to_scope,
    add_response_header_writer_to_scope,
    add_response_to_scope,
)

__all__ = [
    "RequestHeaderReader",
    "Resolve",
    "ResponseHeaderWriter",
    "add_container_to_app",
    "add_request_header_reader_to_scope",
    "add_request_to_scope",
    "add_response_header_writer_to_scope",
    "add_response_to_scope",
    "get_root_scope_from_app",
    "get_scope",
]
