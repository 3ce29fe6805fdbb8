# app/client/api.py
"""
HTTP wrapper over the REST API, grouped by resource.

Every call returns the decoded success envelope. Failures raise ``ApiError``
carrying the HTTP status and the server's message; network failures and
timeouts carry ``status=None``. A 401 expires the session. Nothing is
retried.
"""
from typing import Any, Dict, List, Optional

import httpx

from app.shared.utils.logger import get_logger
from .config import ClientSettings
from .session import AuthSession

logger = get_logger(__name__)


class ApiError(Exception):
    def __init__(self, status: Optional[int], message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.payload = payload or {}

    def __repr__(self):
        return f"ApiError(status={self.status!r}, message={self.message!r})"


def _params(**values) -> Dict[str, Any]:
    params = {}
    for key, value in values.items():
        if value is None:
            continue
        params[key] = str(value).lower() if isinstance(value, bool) else value
    return params


class ApiClient:
    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        session: Optional[AuthSession] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or ClientSettings()
        self.session = session or AuthSession()
        self._http = httpx.AsyncClient(
            base_url=self.settings.API_URL.rstrip("/"),
            timeout=self.settings.REQUEST_TIMEOUT,
            transport=transport,
        )

        self.auth = AuthApi(self)
        self.users = UsersApi(self)
        self.posts = PostsApi(self)
        self.comments = CommentsApi(self)
        self.friends = FriendsApi(self)
        self.messages = MessagesApi(self)
        self.groups = GroupsApi(self)
        self.notifications = NotificationsApi(self)
        self.events = EventsApi(self)
        self.trading = TradingApi(self)
        self.uploads = UploadApi(self)

    async def aclose(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
    ) -> Dict[str, Any]:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"

        try:
            response = await self._http.request(
                method, path, params=params, json=json, files=files, headers=headers
            )
        except httpx.TimeoutException:
            logger.warning(f"{method} {path} timed out")
            raise ApiError(None, "Request timed out. Please try again.")
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(None, "Network error. Please check your connection.")

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.status_code == 401:
            await self.session.expire()
            raise ApiError(401, body.get("message") or "Unauthorized", body)
        if response.is_error or body.get("success") is False:
            message = body.get("message") or f"Request failed with status {response.status_code}"
            raise ApiError(response.status_code, message, body)
        return body

    async def get(self, path: str, **params) -> Dict[str, Any]:
        return await self.request("GET", path, params=_params(**params))

    async def post(self, path: str, json: Any = None) -> Dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Dict[str, Any]:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Dict[str, Any]:
        return await self.request("DELETE", path)


class _Resource:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthApi(_Resource):
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        body = await self.client.post("/auth/login", {"email": email, "password": password})
        self.client.session.set(body["data"]["token"], body["data"]["user"])
        return body

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        body = await self.client.post(
            "/auth/register", {"name": name, "email": email, "password": password}
        )
        self.client.session.set(body["data"]["token"], body["data"]["user"])
        return body

    async def me(self) -> Dict[str, Any]:
        body = await self.client.get("/auth/me")
        self.client.session.user = body["data"]
        return body

    async def change_password(self, old_password: str, new_password: str) -> Dict[str, Any]:
        return await self.client.post(
            "/auth/change-password", {"oldPassword": old_password, "newPassword": new_password}
        )

    async def logout(self) -> Dict[str, Any]:
        return await self.client.post("/auth/logout")


class UsersApi(_Resource):
    async def update_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.patch("/users/me", data)

    async def get_profile(self, user_id: str) -> Dict[str, Any]:
        return await self.client.get(f"/users/{user_id}")

    async def search(self, search_term: str, limit: int = 10) -> Dict[str, Any]:
        return await self.client.get("/users/search", searchTerm=search_term, limit=limit)

    async def online(self) -> Dict[str, Any]:
        return await self.client.get("/users/online")

    async def friends(self, user_id: str, limit: int = 20) -> Dict[str, Any]:
        return await self.client.get(f"/users/{user_id}/friends", limit=limit)

    async def groups(self, user_id: str, limit: int = 20) -> Dict[str, Any]:
        return await self.client.get(f"/users/{user_id}/groups", limit=limit)

    async def block(self, user_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/users/block/{user_id}")

    async def unblock(self, user_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/users/unblock/{user_id}")


class PostsApi(_Resource):
    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.post("/posts", data)

    async def feed(self, limit: int = 10, page: int = 1, sort: str = "-createdAt") -> Dict[str, Any]:
        return await self.client.get("/posts", limit=limit, page=page, sort=sort)

    async def get(self, post_id: str) -> Dict[str, Any]:
        return await self.client.get(f"/posts/{post_id}")

    async def update(self, post_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.patch(f"/posts/{post_id}", data)

    async def delete(self, post_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/posts/{post_id}")

    async def react(self, post_id: str, reaction_type: str) -> Dict[str, Any]:
        return await self.client.post(f"/posts/{post_id}/react", {"type": reaction_type})

    async def reactions(self, post_id: str) -> Dict[str, Any]:
        return await self.client.get(f"/posts/{post_id}/reactions")

    async def share(self, post_id: str, content: Optional[str] = None) -> Dict[str, Any]:
        return await self.client.post(f"/posts/{post_id}/share", {"content": content})

    async def user_posts(self, user_id: str, limit: int = 10, page: int = 1) -> Dict[str, Any]:
        return await self.client.get(f"/posts/user/{user_id}", limit=limit, page=page)

    async def save(self, post_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/posts/{post_id}/save")

    async def unsave(self, post_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/posts/{post_id}/save")

    async def saved(self, limit: int = 10, page: int = 1) -> Dict[str, Any]:
        return await self.client.get("/posts/saved", limit=limit, page=page)


class CommentsApi(_Resource):
    async def add(self, post_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.post(f"/comments/post/{post_id}", data)

    async def for_post(self, post_id: str, limit: int = 20, page: int = 1) -> Dict[str, Any]:
        return await self.client.get(f"/comments/post/{post_id}", limit=limit, page=page)

    async def get(self, comment_id: str) -> Dict[str, Any]:
        return await self.client.get(f"/comments/{comment_id}")

    async def update(self, comment_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.patch(f"/comments/{comment_id}", data)

    async def delete(self, comment_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/comments/{comment_id}")

    async def react(self, comment_id: str, reaction_type: str) -> Dict[str, Any]:
        return await self.client.post(f"/comments/{comment_id}/react", {"type": reaction_type})

    async def replies(self, comment_id: str, limit: int = 10) -> Dict[str, Any]:
        return await self.client.get(f"/comments/{comment_id}/replies", limit=limit)


class FriendsApi(_Resource):
    async def send_request(self, user_id: str, message: Optional[str] = None) -> Dict[str, Any]:
        return await self.client.post(f"/friends/request/{user_id}", {"message": message})

    async def accept(self, request_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/friends/accept/{request_id}")

    async def reject(self, request_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/friends/reject/{request_id}")

    async def cancel(self, request_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/friends/request/{request_id}")

    async def remove(self, user_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/friends/remove/{user_id}")

    async def list(self, limit: int = 50, search_term: Optional[str] = None) -> Dict[str, Any]:
        return await self.client.get("/friends/list", limit=limit, searchTerm=search_term)

    async def requests(self, limit: int = 20) -> Dict[str, Any]:
        return await self.client.get("/friends/requests", limit=limit)

    async def sent_requests(self, limit: int = 20) -> Dict[str, Any]:
        return await self.client.get("/friends/requests/sent", limit=limit)

    async def suggestions(self, limit: int = 10) -> Dict[str, Any]:
        return await self.client.get("/friends/suggestions", limit=limit)


class MessagesApi(_Resource):
    async def send(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.post(f"/messages/send/{user_id}", data)

    async def conversations(self, limit: int = 20) -> Dict[str, Any]:
        return await self.client.get("/messages/conversations", limit=limit)

    async def history(self, user_id: str, limit: int = 50, page: int = 1) -> Dict[str, Any]:
        return await self.client.get(f"/messages/{user_id}", limit=limit, page=page)

    async def mark_as_read(self, user_id: str) -> Dict[str, Any]:
        return await self.client.patch(f"/messages/{user_id}/read")

    async def edit(self, message_id: str, content: str) -> Dict[str, Any]:
        return await self.client.patch(f"/messages/edit/{message_id}", {"content": content})

    async def delete(self, message_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/messages/{message_id}")


class GroupsApi(_Resource):
    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.post("/groups/create", data)

    async def list(
        self, limit: int = 20, category: Optional[str] = None, privacy: Optional[str] = "public"
    ) -> Dict[str, Any]:
        return await self.client.get("/groups", limit=limit, category=category, privacy=privacy)

    async def get(self, group_id: str) -> Dict[str, Any]:
        return await self.client.get(f"/groups/{group_id}")

    async def update(self, group_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.patch(f"/groups/{group_id}", data)

    async def delete(self, group_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/groups/{group_id}")

    async def join(self, group_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/groups/{group_id}/join")

    async def leave(self, group_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/groups/{group_id}/leave")

    async def posts(self, group_id: str, limit: int = 20) -> Dict[str, Any]:
        return await self.client.get(f"/groups/{group_id}/posts", limit=limit)

    async def mine(self, limit: int = 50) -> Dict[str, Any]:
        return await self.client.get("/groups/user", limit=limit)

    async def suggestions(self, limit: int = 10) -> Dict[str, Any]:
        return await self.client.get("/groups/suggestions", limit=limit)


class NotificationsApi(_Resource):
    async def list(
        self, limit: int = 20, page: int = 1, is_read: Optional[bool] = None
    ) -> Dict[str, Any]:
        return await self.client.get("/notifications", limit=limit, page=page, isRead=is_read)

    async def unread_count(self) -> Dict[str, Any]:
        return await self.client.get("/notifications/unread-count")

    async def mark_as_read(
        self, notification_ids: Optional[List[str]] = None, mark_all: bool = False
    ) -> Dict[str, Any]:
        return await self.client.patch(
            "/notifications/mark-read", {"notificationIds": notification_ids, "markAll": mark_all}
        )

    async def delete(self, notification_id: str) -> Dict[str, Any]:
        return await self.client.delete(f"/notifications/{notification_id}")


class EventsApi(_Resource):
    async def list(self, limit: int = 20, page: int = 1, **filters) -> Dict[str, Any]:
        return await self.client.get("/events", limit=limit, page=page, **filters)

    async def mine(self, limit: int = 20, page: int = 1) -> Dict[str, Any]:
        return await self.client.get("/events/my", limit=limit, page=page)

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.post("/events", data)

    async def get(self, event_id: str) -> Dict[str, Any]:
        return await self.client.get(f"/events/{event_id}")

    async def join(self, event_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/events/{event_id}/join")

    async def leave(self, event_id: str) -> Dict[str, Any]:
        return await self.client.post(f"/events/{event_id}/leave")


class TradingApi(_Resource):
    async def listings(self, limit: int = 20, page: int = 1, **filters) -> Dict[str, Any]:
        return await self.client.get("/trading/listings", limit=limit, page=page, **filters)

    async def my_listings(self, limit: int = 20, page: int = 1) -> Dict[str, Any]:
        return await self.client.get("/trading/listings/my", limit=limit, page=page)

    async def categories(self) -> Dict[str, Any]:
        return await self.client.get("/trading/categories")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.post("/trading/listings", data)

    async def contact_seller(self, listing_id: str, message: str) -> Dict[str, Any]:
        return await self.client.post(
            f"/trading/listings/{listing_id}/contact", {"message": message}
        )


class UploadApi(_Resource):
    async def image(self, filename: str, content: bytes, content_type: str = "image/jpeg") -> Dict[str, Any]:
        return await self.client.request(
            "POST", "/upload", files={"image": (filename, content, content_type)}
        )
