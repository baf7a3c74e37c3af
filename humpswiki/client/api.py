"""HTTP client for the wiki API, used by front ends and scripts."""

import logging
from typing import Any

import httpx

from humpswiki.client.session import AuthSession, MemoryTokenStorage
from humpswiki.presentation.forms import check_post_form
from humpswiki.schemas.post import PostCreatedResponse, PostPayload, PostRead
from humpswiki.schemas.post_rules import encode_title_param

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0


class WikiClientError(Exception):
    """Raised when a request fails; message is what the API said, for display as-is."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"Request failed with status {response.status_code}"
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error")
        if isinstance(detail, str):
            return detail
    return f"Request failed with status {response.status_code}"


class WikiClient:
    """
    Calls the API with the session's bearer token.

    Pass http to reuse an existing httpx.Client (for example FastAPI's TestClient);
    otherwise one is created for base_url.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        session: AuthSession | None = None,
        http: httpx.Client | None = None,
        api_prefix: str = "/api",
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.session = session or AuthSession(MemoryTokenStorage())
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.api_prefix = api_prefix.rstrip("/")

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "WikiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {**self.session.auth_headers(), **kwargs.pop("headers", {})}
        try:
            response = self._http.request(
                method, f"{self.api_prefix}{path}", headers=headers, **kwargs
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise WikiClientError(f"Request failed: {e!s}") from e
        if response.is_error:
            raise WikiClientError(_error_message(response), response.status_code)
        return response.json()

    def login(self, username: str, password: str) -> str:
        data = self._request("POST", "/login", json={"username": username, "password": password})
        self.session.login(data["token"])
        return data["token"]

    def logout(self) -> None:
        self.session.logout()

    def connect(self) -> str:
        return self._request("GET", "/connect")["message"]

    def create_post(self, payload: PostPayload) -> PostCreatedResponse:
        problem = check_post_form(payload)
        if problem:
            raise WikiClientError(problem)
        data = self._request("POST", "/createPost", json=payload.model_dump(by_alias=True))
        return PostCreatedResponse.model_validate(data)

    def edit_post(self, current_title: str, payload: PostPayload) -> str:
        problem = check_post_form(payload)
        if problem:
            raise WikiClientError(problem)
        data = self._request(
            "PUT",
            f"/editPost?title={encode_title_param(current_title)}",
            json=payload.model_dump(by_alias=True),
        )
        return data["message"]

    def delete_post(self, post_id: int) -> str:
        return self._request("DELETE", "/deletePost", params={"id": post_id})["message"]

    def get_post(self, title: str) -> PostRead:
        data = self._request("GET", f"/getPost?title={encode_title_param(title)}")
        return PostRead.model_validate(data)

    def get_posts(self) -> list[PostRead]:
        return [PostRead.model_validate(p) for p in self._request("GET", "/getPosts")]

    def get_random_posts(self) -> list[PostRead]:
        return [PostRead.model_validate(p) for p in self._request("GET", "/getRandomPosts")]

    def get_members(self) -> list[PostRead]:
        return [PostRead.model_validate(p) for p in self._request("GET", "/getMembers")]
