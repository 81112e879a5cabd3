from collections.abc import Callable

from fastapi import Depends, Request, Response
from theutilitybelt.functional.utils import constant

from tiny_ioc.core import Container

from .core import get_scope


class RequestHeaderReader:
    def __init__(self, request: Request):
        self.request = request

    def read(self, key: str, default_value: str = "") -> str:
        return self.request.headers.get(key, default_value)

    def header_exists(self, key: str) -> bool:
        return key in self.request.headers

    def __iter__(self):
        return iter(self.request.headers)

    def as_dict(self, filter_keys: Callable[[str], bool] = constant(True)) -> dict[str, str]:
        return {k: v for k, v in self.request.headers.items() if filter_keys(k)}


class ResponseHeaderWriter:
    def __init__(self, response: Response):
        self.response = response

    def write(self, key: str, value: str):
        self.response.headers[key] = value


async def add_request_to_scope(request: Request, scope: Container = Depends(get_scope)):
    scope.register(Request, instance=request)


async def add_response_to_scope(response: Response, scope: Container = Depends(get_scope)):
    scope.register(Response, instance=response)


async def add_request_header_reader_to_scope(request: Request, scope: Container = Depends(get_scope)):
    scope.register(RequestHeaderReader, instance=RequestHeaderReader(request))


async def add_response_header_writer_to_scope(response: Response, scope: Container = Depends(get_scope)):
    scope.register(ResponseHeaderWriter, instance=ResponseHeaderWriter(response))
