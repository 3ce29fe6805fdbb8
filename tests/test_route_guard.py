import pytest

from app.shared.route_guard import RouteDecision, resolve_route

from conftest import register


@pytest.mark.parametrize(
    "path, token, decision",
    [
        ("/", None, RouteDecision.REDIRECT_LOGIN),
        ("/messages/42", None, RouteDecision.REDIRECT_LOGIN),
        ("/settings", None, RouteDecision.REDIRECT_LOGIN),
        ("/login", None, RouteDecision.ALLOW),
        ("/register", None, RouteDecision.ALLOW),
        ("/about", None, RouteDecision.ALLOW),
        ("/login", "token", RouteDecision.REDIRECT_HOME),
        ("/register", "token", RouteDecision.REDIRECT_HOME),
        ("/", "token", RouteDecision.ALLOW),
        ("/profile", "token", RouteDecision.ALLOW),
        ("/api/posts", None, RouteDecision.ALLOW),
        ("/favicon.ico", None, RouteDecision.ALLOW),
        ("/uploads/a.png", None, RouteDecision.ALLOW),
    ],
)
def test_resolve_route(path, token, decision):
    assert resolve_route(path, token) is decision


def test_page_requests_are_redirected(client):
    r = client.get("/friends", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/login"

    alice = register(client, "Alice")
    client.cookies.set("auth_token", alice["token"])
    r = client.get("/login", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/"


def test_api_requests_are_not_redirected(client):
    r = client.get("/api/auth/me", follow_redirects=False)
    assert r.status_code == 401
