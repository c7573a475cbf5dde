"""REST and GraphQL clients exposing the same operations.

Both take the same logical arguments (snake_case field names, canonical
enum values such as ``in-progress``) and return the raw decoded payload of
their transport. A failed call raises TransportError classified through
the shared error table, so failures can be compared across transports.

``http`` is anything with the httpx request API; tests pass a FastAPI
TestClient.
"""

import logging
from typing import Any, Optional

from api.errors import mapping_for_graphql_code, mapping_for_http_status, mapping_for_rest_code

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A failed call on either transport, classified by taxonomy kind."""

    def __init__(self, kind: str, status: Optional[int], message: str):
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"TransportError(kind={self.kind!r}, status={self.status!r}, message={self.message!r})"


def _bearer(token: Optional[str]) -> dict:
    return {"Authorization": f"Bearer {token}"} if token else {}


def _without_none(fields: dict) -> dict:
    return {key: value for key, value in fields.items() if value is not None}


class RestClient:
    def __init__(self, http):
        self.http = http

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> Any:
        response = self.http.request(method, path, headers=_bearer(token), **kwargs)
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            mapping = mapping_for_rest_code(body.get("code"), response.status_code)
            raise TransportError(mapping.kind, response.status_code, str(body.get("detail", response.text)))
        if response.status_code == 204:
            return None
        return response.json()

    # ── users and sessions ──

    def create_user(self, email: str, password: str, first_name: str = None, last_name: str = None) -> dict:
        body = _without_none({"email": email, "password": password, "first_name": first_name, "last_name": last_name})
        return self._request("POST", "/users", json=body)

    def login(self, email: str, password: str) -> dict:
        return self._request("POST", "/sessions", json={"email": email, "password": password})

    def logout(self, token: str) -> bool:
        self._request("DELETE", "/sessions", token)
        return True

    def me(self, token: str) -> dict:
        return self._request("GET", "/users/me", token)

    def list_users(self, token: str) -> list:
        return self._request("GET", "/users", token)

    def get_user(self, user_id: int, token: str) -> dict:
        return self._request("GET", f"/users/{user_id}", token)

    def update_user(self, user_id: int, changes: dict, token: str) -> dict:
        return self._request("PATCH", f"/users/{user_id}", token, json=changes)

    def delete_user(self, user_id: int, token: str) -> bool:
        self._request("DELETE", f"/users/{user_id}", token)
        return True

    # ── tasks ──

    def create_task(self, fields: dict, token: str) -> dict:
        return self._request("POST", "/tasks", token, json=fields)

    def list_tasks(self, token: str, page: int = None, limit: int = None) -> list:
        params = _without_none({"page": page, "limit": limit})
        return self._request("GET", "/tasks", token, params=params)["tasks"]

    def get_task(self, task_id: int, token: str) -> dict:
        return self._request("GET", f"/tasks/{task_id}", token)

    def update_task(self, task_id: int, changes: dict, token: str) -> dict:
        return self._request("PATCH", f"/tasks/{task_id}", token, json=changes)

    def delete_task(self, task_id: int, token: str) -> bool:
        self._request("DELETE", f"/tasks/{task_id}", token)
        return True


USER_FIELDS = "id username email firstName lastName createdAt updatedAt"
TASK_FIELDS = "id title description status priority dueDate userId createdAt updatedAt"

_GRAPHQL_ENUM_FIELDS = ("status", "priority")


def _to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def _graphql_input(fields: dict) -> dict:
    """snake_case input with canonical enum values -> GraphQL input object."""
    result = {}
    for key, value in fields.items():
        if key in _GRAPHQL_ENUM_FIELDS and isinstance(value, str):
            value = value.upper().replace("-", "_")
        result[_to_camel(key)] = value
    return result


class GraphQLClient:
    def __init__(self, http, path: str = "/graphql"):
        self.http = http
        self.path = path

    def execute(self, query: str, variables: dict = None, token: Optional[str] = None) -> dict:
        """Run one operation and return its ``data``; the first error becomes a TransportError."""
        response = self.http.post(
            self.path,
            json={"query": query, "variables": variables or {}},
            headers=_bearer(token),
        )
        try:
            body = response.json()
        except ValueError:
            mapping = mapping_for_http_status(response.status_code)
            raise TransportError(mapping.kind, response.status_code, response.text)

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            error = errors[0]
            code = (error.get("extensions") or {}).get("code")
            mapping = mapping_for_graphql_code(code)
            raise TransportError(mapping.kind, response.status_code, error.get("message", ""))
        if response.status_code >= 400:
            mapping = mapping_for_http_status(response.status_code)
            raise TransportError(mapping.kind, response.status_code, str(body))
        return body["data"]

    # ── users and sessions ──

    def create_user(self, email: str, password: str, first_name: str = None, last_name: str = None) -> dict:
        query = f"mutation($input: CreateUserInput!) {{ createUser(input: $input) {{ {USER_FIELDS} }} }}"
        variables = {"input": _graphql_input(_without_none(
            {"email": email, "password": password, "first_name": first_name, "last_name": last_name}
        ))}
        return self.execute(query, variables)["createUser"]

    def login(self, email: str, password: str) -> dict:
        query = f"mutation($input: LoginInput!) {{ login(input: $input) {{ token user {{ {USER_FIELDS} }} }} }}"
        return self.execute(query, {"input": {"email": email, "password": password}})["login"]

    def logout(self, token: str) -> bool:
        return self.execute("mutation { logout }", token=token)["logout"]

    def me(self, token: str) -> dict:
        return self.execute(f"{{ me {{ {USER_FIELDS} }} }}", token=token)["me"]

    def list_users(self, token: str) -> list:
        return self.execute(f"{{ users {{ {USER_FIELDS} }} }}", token=token)["users"]

    def get_user(self, user_id: str, token: str) -> dict:
        query = f"query($id: ID!) {{ user(id: $id) {{ {USER_FIELDS} }} }}"
        return self.execute(query, {"id": user_id}, token)["user"]

    def update_user(self, user_id: str, changes: dict, token: str) -> dict:
        query = (
            f"mutation($id: ID!, $input: UpdateUserInput!) "
            f"{{ updateUser(id: $id, input: $input) {{ {USER_FIELDS} }} }}"
        )
        return self.execute(query, {"id": user_id, "input": _graphql_input(changes)}, token)["updateUser"]

    def delete_user(self, user_id: str, token: str) -> bool:
        query = "mutation($id: ID!) { deleteUser(id: $id) }"
        return self.execute(query, {"id": user_id}, token)["deleteUser"]

    # ── tasks ──

    def create_task(self, fields: dict, token: str) -> dict:
        query = f"mutation($input: CreateTaskInput!) {{ createTask(input: $input) {{ {TASK_FIELDS} }} }}"
        return self.execute(query, {"input": _graphql_input(fields)}, token)["createTask"]

    def list_tasks(self, token: str, page: int = None, limit: int = None) -> list:
        query = f"query($page: Int, $limit: Int) {{ tasks(page: $page, limit: $limit) {{ {TASK_FIELDS} }} }}"
        # omitted arguments fall back to the schema defaults
        variables = _without_none({"page": page, "limit": limit})
        return self.execute(query, variables, token)["tasks"]

    def get_task(self, task_id: str, token: str) -> dict:
        query = f"query($id: ID!) {{ task(id: $id) {{ {TASK_FIELDS} }} }}"
        return self.execute(query, {"id": task_id}, token)["task"]

    def update_task(self, task_id: str, changes: dict, token: str) -> dict:
        query = (
            f"mutation($id: ID!, $input: UpdateTaskInput!) "
            f"{{ updateTask(id: $id, input: $input) {{ {TASK_FIELDS} }} }}"
        )
        return self.execute(query, {"id": task_id, "input": _graphql_input(changes)}, token)["updateTask"]

    def delete_task(self, task_id: str, token: str) -> bool:
        query = "mutation($id: ID!) { deleteTask(id: $id) }"
        return self.execute(query, {"id": task_id}, token)["deleteTask"]
