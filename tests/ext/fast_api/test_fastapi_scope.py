from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from tiny_ioc import Container, Lifetime
from tiny_ioc.ext.fastapi import (
    RequestHeaderReader,
    Resolve,
    ResponseHeaderWriter,
    add_container_to_app,
    add_request_header_reader_to_scope,
    add_request_to_scope,
    add_response_header_writer_to_scope,
)


def create_app(configure, dependencies=None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(a):
        container = Container()
        configure(container)
        async with add_container_to_app(a, container):
            yield

    return FastAPI(lifespan=lifespan, dependencies=dependencies or [])


def test_scoped_dependencies_are_shared_within_a_request():
    class UnitOfWork:
        pass

    app = create_app(lambda c: c.register(UnitOfWork, lifetime=Lifetime.scoped))

    seen = []

    @app.get("/")
    def read_root(first: UnitOfWork = Resolve(UnitOfWork), second: UnitOfWork = Resolve(UnitOfWork)):
        seen.append((first, second))
        return {}

    with TestClient(app) as test_client:
        test_client.get("/")
        test_client.get("/")

    (first_request, _), (second_request, _) = seen
    assert seen[0][0] is seen[0][1]
    assert seen[1][0] is seen[1][1]
    assert first_request is not second_request


def test_single_dependencies_are_shared_across_requests():
    class Settings:
        pass

    settings = Settings()
    seen = []

    app = create_app(lambda c: c.register(Settings, instance=settings, lifetime=Lifetime.single))

    @app.get("/")
    def read_root(resolved: Settings = Resolve(Settings)):
        seen.append(resolved)
        return {}

    with TestClient(app) as test_client:
        test_client.get("/")
        test_client.get("/")

    assert seen == [settings, settings]


def test_resolve_with_tag():
    app = create_app(
        lambda c: c.register("greeting", instance="hello", tag="en").register("greeting", instance="hola", tag="es")
    )

    @app.get("/")
    def read_root(greeting: str = Resolve("greeting", "es")):
        return {"greeting": greeting}

    with TestClient(app) as test_client:
        response = test_client.get("/")

    assert response.status_code == 200
    assert response.json() == {"greeting": "hola"}


def test_request_can_be_injected_into_dependencies():
    class PathReader:
        def __init__(self, request: Request):
            self.request = request

        def read(self) -> str:
            return self.request.url.path

    app = create_app(lambda c: c.register(PathReader), dependencies=[Depends(add_request_to_scope)])

    @app.get("/items")
    def read_items(reader: PathReader = Resolve(PathReader)):
        return {"path": reader.read()}

    with TestClient(app) as test_client:
        response = test_client.get("/items")

    assert response.json() == {"path": "/items"}


def test_response_writer_writes_a_header_to_response():
    class MyDependency:
        HEADER_NAME = "X-Action"
        HEADER_VALUE = "my-action"

        def __init__(self, header_writer: ResponseHeaderWriter):
            self.header_writer = header_writer

        def do_action(self):
            self.header_writer.write(self.HEADER_NAME, self.HEADER_VALUE)

    app = create_app(
        lambda c: c.register(MyDependency), dependencies=[Depends(add_response_header_writer_to_scope)]
    )

    @app.get("/")
    def read_root(my_dependency: MyDependency = Resolve(MyDependency)):
        my_dependency.do_action()
        return {"message": "Hello World"}

    with TestClient(app) as test_client:
        response = test_client.get("/")

    assert response.status_code == 200
    assert response.headers["X-Action"] == "my-action"


def test_request_header_reader_reads_headers():
    class MyDependency:
        HEADER_NAME = "X-Action"

        def __init__(self, header_reader: RequestHeaderReader):
            self.header_reader = header_reader

        def do_action(self) -> str:
            return self.header_reader.read(self.HEADER_NAME)

    app = create_app(
        lambda c: c.register(MyDependency), dependencies=[Depends(add_request_header_reader_to_scope)]
    )

    @app.get("/")
    async def read_root(
        my_dependency: MyDependency = Resolve(MyDependency),
        reader: RequestHeaderReader = Resolve(RequestHeaderReader),
    ):
        return {
            "action": my_dependency.do_action(),
            "exists": reader.header_exists("x-action"),
            "filtered": reader.as_dict(lambda k: k.startswith("x-")),
        }

    with TestClient(app) as test_client:
        response = test_client.get("/", headers={"X-Action": "my-action"})

    body = response.json()
    assert response.status_code == 200
    assert body["action"] == "my-action"
    assert body["exists"] is True
    assert body["filtered"] == {"x-action": "my-action"}


def test_root_scope_is_released_when_the_app_shuts_down():
    app = create_app(lambda c: None)

    with TestClient(app):
        assert isinstance(app.state.root_scope, Container)

    assert not hasattr(app.state, "root_scope")
