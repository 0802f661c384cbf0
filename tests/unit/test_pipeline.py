"""
Unit tests for middleware chaining.
"""

import pytest

from httphandlers.http import HTTPRequest, serve
from httphandlers.middleware import (
    FunctionMiddleware,
    Middleware,
    MiddlewarePipeline,
    function_middleware,
)


def tagging(tag, calls):
    """Middleware that records entry and exit around next()."""

    def mw(writer, request, next):
        calls.append(f"{tag}:before")
        next(writer, request)
        calls.append(f"{tag}:after")

    return FunctionMiddleware(mw, name=tag)


class TestMiddlewarePipeline:
    """Tests for MiddlewarePipeline."""

    def test_first_added_is_outermost(self):
        calls = []

        def handler(writer, request):
            calls.append("handler")

        pipeline = MiddlewarePipeline().add(tagging("a", calls)).add(tagging("b", calls))
        serve(pipeline.wrap(handler), HTTPRequest("GET", "/"))

        assert calls == ["a:before", "b:before", "handler", "b:after", "a:after"]

    def test_use_adds_in_order(self):
        first, second = tagging("first", []), tagging("second", [])
        pipeline = MiddlewarePipeline().use(first, second)

        assert len(pipeline) == 2
        assert [mw.name for mw in pipeline] == ["first", "second"]

    def test_empty_pipeline_returns_handler(self, ok_handler):
        assert MiddlewarePipeline().wrap(ok_handler) is ok_handler

    def test_short_circuit(self, ok_handler):
        @function_middleware
        def deny(writer, request, next):
            writer.write_header(403)

        app = MiddlewarePipeline().add(deny).wrap(ok_handler)
        response = serve(app, HTTPRequest("GET", "/"))

        assert response.status == 403
        assert response.body == b""


class TestMiddleware:
    """Tests for the Middleware base class."""

    def test_wrap_rejects_non_callable(self):
        with pytest.raises(TypeError):
            tagging("x", []).wrap("not a handler")

    def test_wrapped_name(self, ok_handler):
        wrapped = tagging("logger", []).wrap(ok_handler)
        assert wrapped.__name__ == "logger(handler)"

    def test_function_middleware(self):
        @function_middleware
        def add_header(writer, request, next):
            writer.set_header("X-Request-Id", "abc")
            next(writer, request)

        assert isinstance(add_header, FunctionMiddleware)
        assert isinstance(add_header, Middleware)
        assert add_header.name == "add_header"

        response = serve(add_header.wrap(lambda w, r: w.write(b"x")), HTTPRequest("GET", "/"))
        assert response.headers == {"X-Request-Id": "abc"}
        assert response.body == b"x"

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Middleware()
