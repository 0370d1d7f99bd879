"""Tests for switchback.routing.router — registration and dispatch."""

import threading
from concurrent.futures import ThreadPoolExecutor
from http import HTTPMethod

import pytest

from switchback.config import RouterConfig
from switchback.errors import PatternError
from switchback.http.request import Request
from switchback.http.response import ResponseWriter
from switchback.routing.methods import SUPPORTED_METHODS
from switchback.routing.router import Router


def _recorder(calls: list[str], tag: str):
    def handler(response: ResponseWriter, request: Request) -> None:
        calls.append(tag)

    return handler


def _middleware(calls: list[str], tag: str, handled: bool):
    def middleware(response: ResponseWriter, request: Request) -> bool:
        calls.append(tag)
        return handled

    return middleware


def _dispatch(router: Router, method: str, target: str) -> ResponseWriter:
    response = ResponseWriter()
    router.dispatch(response, Request.create(method, target))
    return response


def _register_every_method(router: Router, path: str, calls: list[str]) -> None:
    router.get(path, _recorder(calls, "GET"))
    router.put(path, _recorder(calls, "PUT"))
    router.post(path, _recorder(calls, "POST"))
    router.delete(path, _recorder(calls, "DELETE"))
    router.options(path, _recorder(calls, "OPTIONS"))
    router.head(path, _recorder(calls, "HEAD"))
    router.trace(path, _recorder(calls, "TRACE"))
    router.connect(path, _recorder(calls, "CONNECT"))
    router.patch(path, _recorder(calls, "PATCH"))


class TestMethodRouting:
    @pytest.mark.parametrize("method", [str(m) for m in SUPPORTED_METHODS])
    def test_only_matching_method_handler_runs(self, method: str) -> None:
        calls: list[str] = []
        router = Router()
        _register_every_method(router, "/path/:to/:use", calls)
        fallback: list[str] = []
        router.set_not_found(_recorder(fallback, "404"))

        _dispatch(router, method, "/path/to/use")

        assert calls == [method]
        assert fallback == []

    def test_method_is_case_insensitive(self) -> None:
        calls: list[str] = []
        router = Router()
        router.get("/", _recorder(calls, "index"))

        _dispatch(router, "get", "/")

        assert calls == ["index"]

    def test_unregistered_method_uses_fallback(self) -> None:
        calls: list[str] = []
        fallback: list[str] = []
        router = Router()
        router.get("/posts", _recorder(calls, "GET"))
        router.set_not_found(_recorder(fallback, "404"))

        _dispatch(router, "POST", "/posts")

        assert calls == []
        assert fallback == ["404"]


class TestGenericRegistration:
    def test_add_known_method(self) -> None:
        calls: list[str] = []
        router = Router()
        route = router.add("patch", "/items/:id", _recorder(calls, "patch"))

        assert route is not None
        assert route.keys == ("id",)
        _dispatch(router, "PATCH", "/items/3")
        assert calls == ["patch"]

    def test_add_accepts_enum(self) -> None:
        router = Router()
        assert router.add(HTTPMethod.HEAD, "/", _recorder([], "head")) is not None
        assert len(router.routes("HEAD")) == 1

    def test_add_unknown_method_is_ignored(self) -> None:
        fallback: list[str] = []
        router = Router()
        router.set_not_found(_recorder(fallback, "404"))

        assert router.add("BREW", "/coffee", _recorder([], "brew")) is None
        assert router.routes() == []

        _dispatch(router, "BREW", "/coffee")
        assert fallback == ["404"]

    def test_decorator_form(self) -> None:
        router = Router()

        @router.post("/posts")
        def create_post(response: ResponseWriter, request: Request) -> None:
            response.set_status(201)

        assert create_post.__name__ == "create_post"
        assert _dispatch(router, "POST", "/posts").status == 201

    def test_direct_form_returns_handler(self) -> None:
        router = Router()
        handler = _recorder([], "x")
        assert router.get("/", handler) is handler

    def test_invalid_template_registers_nothing(self) -> None:
        router = Router()
        with pytest.raises(PatternError):
            router.get("/users/:id(+)", _recorder([], "bad"))
        assert router.routes() == []


class TestMatchAll:
    def test_every_method_reaches_shared_handler(self) -> None:
        calls: list[str] = []
        router = Router()
        router.match_all("/path/:to/:use", _recorder(calls, "any"))

        for method in SUPPORTED_METHODS:
            _dispatch(router, str(method), "/path/to/use")

        assert calls == ["any"] * len(SUPPORTED_METHODS)

    def test_each_method_gets_its_own_route(self) -> None:
        router = Router()
        router.match_all("/health", _recorder([], "any"))

        routes = [router.routes(method)[0] for method in SUPPORTED_METHODS]
        assert len({id(route) for route in routes}) == len(SUPPORTED_METHODS)
        assert all(route.path == "/health" for route in routes)


class TestFallback:
    def test_runs_exactly_once(self) -> None:
        calls: list[str] = []
        fallback: list[str] = []
        router = Router()
        _register_every_method(router, "/path/:to/:use", calls)
        router.set_not_found(_recorder(fallback, "404"))

        _dispatch(router, "GET", "/nowhere")

        assert calls == []
        assert fallback == ["404"]

    def test_default_fallback(self) -> None:
        response = _dispatch(Router(), "GET", "/missing")
        assert response.status == 404
        assert response.body == b"Not Found"
        assert response.content_type.startswith("text/plain")

    def test_default_fallback_body_from_config(self) -> None:
        router = Router(RouterConfig(not_found_body="nothing here"))
        assert _dispatch(router, "GET", "/missing").body == b"nothing here"


class TestMiddleware:
    def test_unhandled_middleware_continues_to_route(self) -> None:
        calls: list[str] = []
        router = Router()
        router.add_middleware(_middleware(calls, "mw", handled=False))
        router.get("/path/:to/:use", _recorder(calls, "route"))

        _dispatch(router, "GET", "/path/to/use")

        assert calls == ["mw", "route"]

    def test_handled_middleware_stops_everything(self) -> None:
        calls: list[str] = []
        fallback: list[str] = []
        router = Router()
        router.add_middleware(_middleware(calls, "first", handled=True))
        router.add_middleware(_middleware(calls, "second", handled=False))
        router.get("/path/:to/:use", _recorder(calls, "route"))
        router.set_not_found(_recorder(fallback, "404"))

        _dispatch(router, "GET", "/path/to/use")

        assert calls == ["first"]
        assert fallback == []

    def test_runs_in_registration_order(self) -> None:
        calls: list[str] = []
        router = Router()
        for tag in ("a", "b", "c"):
            router.add_middleware(_middleware(calls, tag, handled=False))

        _dispatch(router, "GET", "/")

        assert calls == ["a", "b", "c"]

    def test_duplicate_registration_runs_twice(self) -> None:
        calls: list[str] = []
        router = Router()
        mw = _middleware(calls, "mw", handled=False)
        router.add_middleware(mw)
        router.add_middleware(mw)

        _dispatch(router, "GET", "/")

        assert calls == ["mw", "mw"]

    def test_middleware_runs_for_unknown_methods(self) -> None:
        calls: list[str] = []
        router = Router()
        router.add_middleware(_middleware(calls, "mw", handled=True))

        _dispatch(router, "BREW", "/")

        assert calls == ["mw"]

    def test_decorator_form(self) -> None:
        router = Router()

        @router.add_middleware
        def teapot(response: ResponseWriter, request: Request) -> bool:
            response.set_status(418)
            return True

        assert _dispatch(router, "GET", "/").status == 418


class TestStrictness:
    def test_default_is_unrestricted(self) -> None:
        calls: list[str] = []
        router = Router()
        router.get("/test/:required", _recorder(calls, "route"))

        _dispatch(router, "GET", "/test/one/")

        assert calls == ["route"]

    def test_restricted_rejects_trailing_slash(self) -> None:
        calls: list[str] = []
        router = Router().restrict_matching()
        router.get("/test/:required", _recorder(calls, "route"))

        assert _dispatch(router, "GET", "/test/one/").status == 404
        assert calls == []

    def test_strict_from_config(self) -> None:
        router = Router(RouterConfig(strict=True))
        assert router.strict is True
        route = router.add("GET", "/a", _recorder([], "a"))
        assert route is not None
        assert route.strict is True

    def test_change_is_not_retroactive(self) -> None:
        calls: list[str] = []
        router = Router()
        router.get("/loose/:x", _recorder(calls, "loose"))
        router.strict = True
        router.get("/tight/:x", _recorder(calls, "tight"))
        router.unrestrict_matching()

        _dispatch(router, "GET", "/loose/1/")
        _dispatch(router, "GET", "/tight/1/")

        assert calls == ["loose"]


class TestLookup:
    def test_first_registered_wins(self) -> None:
        calls: list[str] = []
        router = Router()
        router.get("/posts/:id", _recorder(calls, "by-id"))
        router.get("/posts/new", _recorder(calls, "new"))

        _dispatch(router, "GET", "/posts/new")

        assert calls == ["by-id"]

    def test_find_returns_match(self) -> None:
        router = Router()
        handler = _recorder([], "show")
        router.get("/posts/:id.:format?", handler)

        match = router.find("GET", "/posts/42.json")

        assert match is not None
        assert match.handler is handler
        assert match.route.path == "/posts/:id.:format?"
        assert match.path_params == {"id": "42", "format": "json"}

    def test_find_miss(self) -> None:
        router = Router()
        router.get("/posts/:id", _recorder([], "show"))
        assert router.find("GET", "/users/1") is None
        assert router.find("BREW", "/posts/1") is None

    def test_routes_in_registration_order(self) -> None:
        router = Router()
        router.get("/b", _recorder([], "b"))
        router.get("/a", _recorder([], "a"))
        router.post("/c", _recorder([], "c"))

        assert [r.path for r in router.routes("GET")] == ["/b", "/a"]
        assert [r.path for r in router.routes()] == ["/b", "/a", "/c"]
        assert router.routes("BREW") == []

    def test_query_string_is_not_part_of_path(self) -> None:
        calls: list[str] = []
        router = Router()
        router.get("/search", _recorder(calls, "search"))

        _dispatch(router, "GET", "/search?q=router")

        assert calls == ["search"]


class TestPathParams:
    def test_handler_sees_captured_values(self) -> None:
        seen: list[dict[str, str]] = []
        router = Router()

        @router.get("/users/:user_id/posts/:post_id?")
        def show(response: ResponseWriter, request: Request) -> None:
            seen.append(dict(request.path_params))

        _dispatch(router, "GET", "/users/7/posts/42")
        _dispatch(router, "GET", "/users/7/posts")
        _dispatch(router, "GET", "/users/7")

        assert seen == [{"user_id": "7", "post_id": "42"}, {"user_id": "7"}]

    def test_author_named_group_is_not_a_param(self) -> None:
        seen: list[dict[str, str]] = []
        router = Router()

        @router.get("/x(?P<tag>a|b)/:id")
        def show(response: ResponseWriter, request: Request) -> None:
            seen.append(dict(request.path_params))

        response = _dispatch(router, "GET", "/xa/5")

        assert response.status == 200
        assert seen == [{"id": "5"}]

    def test_middleware_sees_no_params(self) -> None:
        seen: list[dict[str, str]] = []
        router = Router()

        @router.add_middleware
        def inspect(response: ResponseWriter, request: Request) -> bool:
            seen.append(dict(request.path_params))
            return False

        router.get("/users/:id", _recorder([], "show"))
        _dispatch(router, "GET", "/users/1")

        assert seen == [{}]


class TestErrors:
    def test_handler_exception_propagates(self) -> None:
        router = Router()

        @router.get("/boom")
        def boom(response: ResponseWriter, request: Request) -> None:
            raise RuntimeError("kaboom")

        with pytest.raises(RuntimeError, match="kaboom"):
            _dispatch(router, "GET", "/boom")


class TestConcurrency:
    def test_handler_may_register_routes(self) -> None:
        calls: list[str] = []
        router = Router()

        @router.post("/admin/routes")
        def add_route(response: ResponseWriter, request: Request) -> None:
            router.get("/dynamic", _recorder(calls, "dynamic"))

        _dispatch(router, "POST", "/admin/routes")
        _dispatch(router, "GET", "/dynamic")

        assert calls == ["dynamic"]

    def test_registration_during_dispatch(self) -> None:
        router = Router()
        hits: list[str] = []
        hits_lock = threading.Lock()

        def handler(response: ResponseWriter, request: Request) -> None:
            with hits_lock:
                hits.append(request.path)

        router.get("/warm/:n", handler)

        def register(n: int) -> None:
            router.get(f"/route{n}/:x", handler)

        def dispatch(n: int) -> int:
            return _dispatch(router, "GET", f"/warm/{n}").status

        with ThreadPoolExecutor(max_workers=8) as pool:
            registered = [pool.submit(register, n) for n in range(50)]
            statuses = [pool.submit(dispatch, n) for n in range(200)]
            for future in registered:
                future.result()
            assert all(future.result() == 200 for future in statuses)

        assert len(router.routes("GET")) == 51
        assert len(hits) == 200
