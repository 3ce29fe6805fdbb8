import asyncio
import json

import httpx
import pytest

from app.client import (
    ApiClient,
    ApiError,
    AuthSession,
    ClientContext,
    ClientSettings,
    ConversationView,
    QueryCache,
    RealtimeClient,
    TypingNotifier,
)

USER = {"id": "u1", "name": "Alice"}


def make_settings(**overrides):
    values = {"RECONNECT_ATTEMPTS": 0, "RECONNECT_DELAY": 0, "TYPING_TIMEOUT": 0.01}
    values.update(overrides)
    return ClientSettings(**values)


def make_api(handler, token="t0k3n"):
    session = AuthSession(token)
    return ApiClient(make_settings(), session, transport=httpx.MockTransport(handler))


class FakeSocket:
    def __init__(self, frames=(), close_code=1000):
        self.frames = list(frames)
        self.sent = []
        self.close_code = close_code

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield json.dumps(frame)

    async def send(self, raw):
        self.sent.append(json.loads(raw))

    async def close(self):
        pass


class FakeConnector:
    def __init__(self, *sockets):
        self.sockets = list(sockets)
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        if not self.sockets:
            raise OSError("Connection refused")
        return self.sockets.pop(0)


async def test_request_sends_bearer_and_returns_envelope():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("authorization")
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"success": True, "data": [1, 2]})

    async with make_api(handler) as api:
        body = await api.notifications.list(limit=5, is_read=False)

    assert body["data"] == [1, 2]
    assert seen["auth"] == "Bearer t0k3n"
    assert seen["path"] == "/api/notifications"
    assert seen["params"] == {"limit": "5", "page": "1", "isRead": "false"}


async def test_saved_post_calls():
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path, dict(request.url.params)))
        return httpx.Response(200, json={"success": True, "data": []})

    async with make_api(handler) as api:
        await api.posts.save("p1")
        await api.posts.saved(limit=5)
        await api.posts.unsave("p1")

    assert calls == [
        ("POST", "/api/posts/p1/save", {}),
        ("GET", "/api/posts/saved", {"limit": "5", "page": "1"}),
        ("DELETE", "/api/posts/p1/save", {}),
    ]


async def test_error_envelope_raises_api_error():
    def handler(request):
        return httpx.Response(409, json={"success": False, "message": "Friend request already sent"})

    async with make_api(handler) as api:
        with pytest.raises(ApiError) as exc:
            await api.friends.send_request("u2")

    assert exc.value.status == 409
    assert exc.value.message == "Friend request already sent"


async def test_unauthorized_expires_session():
    expired = []

    def handler(request):
        return httpx.Response(401, json={"success": False, "message": "Invalid token"})

    async with make_api(handler) as api:
        api.session.on_unauthorized(lambda: expired.append(True))
        with pytest.raises(ApiError) as exc:
            await api.auth.me()

    assert exc.value.status == 401
    assert api.session.token is None
    assert expired == [True]


@pytest.mark.parametrize(
    "error, message",
    [
        (httpx.ConnectError, "Network error. Please check your connection."),
        (httpx.ReadTimeout, "Request timed out. Please try again."),
    ],
)
async def test_transport_failures(error, message):
    def handler(request):
        raise error("boom", request=request)

    async with make_api(handler) as api:
        with pytest.raises(ApiError) as exc:
            await api.posts.feed()

    assert exc.value.status is None
    assert exc.value.message == message


async def test_login_stores_session():
    def handler(request):
        assert request.url.path == "/api/auth/login"
        assert json.loads(request.content) == {"email": "a@example.com", "password": "secret123"}
        return httpx.Response(200, json={"success": True, "data": {"token": "fresh", "user": USER}})

    async with make_api(handler, token=None) as api:
        await api.auth.login("a@example.com", "secret123")
        assert api.session.token == "fresh"
        assert api.session.user_id == "u1"


async def test_query_cache():
    cache = QueryCache()
    calls = []

    async def loader():
        calls.append(1)
        return len(calls)

    assert await cache.fetch(("posts", "feed", 1), loader) == 1
    assert await cache.fetch(("posts", "feed", 1), loader) == 1
    assert await cache.fetch(("posts", "feed", 1), loader, refresh=True) == 2
    cache.set(("posts", "p1"), {"id": "p1"})
    cache.set(("friends", "list"), [])

    assert cache.invalidate("posts") == 2
    assert ("posts", "p1") not in cache
    assert ("friends", "list") in cache
    assert cache.invalidate() == 1


async def test_realtime_answers_ping_and_tracks_presence():
    socket = FakeSocket(
        [{"event": "onlineUsers", "data": ["u1", "u2"]}, {"event": "ping"}, {"event": "custom", "data": 7}]
    )
    connector = FakeConnector(socket)
    realtime = RealtimeClient(AuthSession("abc"), make_settings(), connect=connector)
    seen = []
    realtime.on("connect", lambda _: seen.append("connect"))
    realtime.on("onlineUsers", lambda data: seen.append(("online", list(realtime.online_users))))
    realtime.on("custom", lambda data: seen.append(("custom", data)))
    realtime.on("disconnect", lambda _: seen.append("disconnect"))

    await realtime.start()

    assert connector.urls == ["ws://localhost:5000/ws?token=abc"]
    assert socket.sent == [{"event": "pong", "data": None}]
    assert seen == ["connect", ("online", ["u1", "u2"]), ("custom", 7), "disconnect"]
    assert realtime.online_users == []


async def test_realtime_reconnect_is_bounded():
    connector = FakeConnector()
    realtime = RealtimeClient(AuthSession("abc"), make_settings(RECONNECT_ATTEMPTS=2), connect=connector)
    await realtime.start()
    assert len(connector.urls) == 3
    assert not realtime.is_running


class TimingOutConnector(FakeConnector):
    def __call__(self, url):
        self.urls.append(url)
        raise asyncio.TimeoutError()


async def test_realtime_retries_after_handshake_timeout():
    connector = TimingOutConnector()
    realtime = RealtimeClient(AuthSession("abc"), make_settings(RECONNECT_ATTEMPTS=2), connect=connector)
    await realtime.start()
    assert len(connector.urls) == 3
    assert realtime.failed_attempts == 3
    assert not realtime.is_running


async def test_realtime_unauthorized_close_expires_session():
    session = AuthSession("stale")
    connector = FakeConnector(FakeSocket(close_code=4401))
    realtime = RealtimeClient(session, make_settings(RECONNECT_ATTEMPTS=5), connect=connector)
    await realtime.start()
    assert len(connector.urls) == 1
    assert session.token is None


async def test_realtime_requires_token():
    realtime = RealtimeClient(AuthSession(), make_settings())
    with pytest.raises(RuntimeError):
        realtime.start()
    assert await realtime.emit("typing", {}) is False


class RecordingRealtime:
    def __init__(self):
        self.settings = make_settings()
        self.emitted = []
        self.handlers = {}

    async def emit(self, event, data=None):
        self.emitted.append((event, data))
        return True

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def off(self, event, handler):
        self.handlers[event].remove(handler)

    async def fire(self, event, data):
        for handler in list(self.handlers.get(event, [])):
            result = handler(data)
            if asyncio.iscoroutine(result):
                await result


async def test_typing_notifier_sends_stop_after_timeout():
    realtime = RecordingRealtime()
    notifier = TypingNotifier(realtime, "peer")

    await notifier.on_draft_change("h")
    await notifier.on_draft_change("hi")
    await asyncio.sleep(0.05)
    await notifier.on_draft_change("")
    await notifier.stop()

    states = [data["isTyping"] for _, data in realtime.emitted]
    assert states[:3] == [True, True, False]
    assert states[-1] is False
    assert all(data["userId"] == "peer" for _, data in realtime.emitted)


class SlowRealtime(RecordingRealtime):
    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def emit(self, event, data=None):
        if not data["isTyping"]:
            await self.release.wait()
        return await super().emit(event, data)


async def test_typing_notifier_holds_timeout_emit_until_done():
    realtime = SlowRealtime()
    notifier = TypingNotifier(realtime, "peer")

    await notifier.on_draft_change("h")
    await asyncio.sleep(0.05)
    assert len(notifier._pending) == 1

    realtime.release.set()
    await asyncio.sleep(0.01)
    assert notifier._pending == set()
    assert [data["isTyping"] for _, data in realtime.emitted] == [True, False]


class FakeMessagesApi:
    def __init__(self, history):
        self._history = history
        self.read = []

    async def history(self, user_id, limit=50):
        return {"success": True, "data": self._history}

    async def send(self, user_id, payload):
        return {"success": True, "data": message("m3", "me", user_id, payload["content"])}

    async def mark_as_read(self, user_id):
        self.read.append(user_id)


class FakeApi:
    def __init__(self, history):
        self.messages = FakeMessagesApi(history)


def message(message_id, sender, receiver, content="hi"):
    return {"id": message_id, "sender": {"id": sender}, "receiver": {"id": receiver}, "content": content}


async def test_conversation_deduplicates_messages():
    realtime = RecordingRealtime()
    api = FakeApi([message("m1", "peer", "me"), message("m2", "me", "peer")])
    view = ConversationView(api, realtime, "peer")

    await view.load()
    await realtime.fire("newMessage", message("m2", "me", "peer"))
    await realtime.fire("newMessage", message("x1", "other", "me"))
    sent = await view.send("hello")
    await realtime.fire("newMessage", sent)

    assert [m["id"] for m in view.messages] == ["m1", "m2", "m3"]
    assert api.messages.read == []


async def test_conversation_tracks_typing_and_reads_when_focused():
    realtime = RecordingRealtime()
    api = FakeApi([])
    view = ConversationView(api, realtime, "peer")

    await realtime.fire("typing", {"userId": "peer", "isTyping": True})
    assert view.peer_typing is True
    await realtime.fire("typing", {"userId": "other", "isTyping": False})
    assert view.peer_typing is True

    await view.focus()
    await realtime.fire("newMessage", message("m9", "peer", "me"))
    assert view.peer_typing is False
    assert api.messages.read == ["peer", "peer"]

    view.close()
    assert realtime.handlers["newMessage"] == []


async def test_context_start_without_valid_token():
    def handler(request):
        return httpx.Response(401, json={"success": False, "message": "Invalid token"})

    context = ClientContext(make_settings(), token="expired", transport=httpx.MockTransport(handler))
    assert await context.start() is None
    assert context.session.token is None
    assert not context.realtime.is_running
    await context.close()


async def test_context_login_and_logout():
    requests = []

    def handler(request):
        requests.append(request.url.path)
        if request.url.path == "/api/auth/login":
            return httpx.Response(200, json={"success": True, "data": {"token": "fresh", "user": USER}})
        return httpx.Response(200, json={"success": True, "message": "Logged out"})

    connector = FakeConnector()
    context = ClientContext(
        make_settings(), transport=httpx.MockTransport(handler), connect=connector
    )
    context.cache.set(("posts", "feed"), [])

    user = await context.login("a@example.com", "secret123")
    assert user == USER
    await asyncio.sleep(0)
    assert connector.urls == ["ws://localhost:5000/ws?token=fresh"]

    await context.logout()
    assert requests == ["/api/auth/login", "/api/auth/logout"]
    assert context.session.token is None
    assert ("posts", "feed") not in context.cache
    await context.close()
