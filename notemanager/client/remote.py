"""Async HTTP glue for the remote auth and note endpoints."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from notemanager.client.errors import (
    AuthError,
    AuthErrorKind,
    SessionError,
    SessionErrorKind,
    TransportError,
)
from notemanager.models.notes import Note, NoteStatus

logger = logging.getLogger(__name__)

AUTH_PREFIX = "/api/auth"
NOTES_PREFIX = "/api/notes"


def create_http_client(base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        headers={"Content-Type": "application/json"},
        transport=transport,
    )


def _auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except json.JSONDecodeError:
        return response.reason_phrase
    if isinstance(payload, dict):
        return str(payload.get("detail") or payload.get("message") or response.reason_phrase)
    return response.reason_phrase


class RemoteAuthApi:
    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _post(self, path: str, email: str, password: str) -> httpx.Response:
        try:
            return await self._http.post(f"{AUTH_PREFIX}{path}", json={"email": email, "password": password})
        except httpx.HTTPError as exc:
            raise AuthError(AuthErrorKind.NETWORK, str(exc)) from exc

    async def signup(self, email: str, password: str) -> None:
        response = await self._post("/signup", email, password)
        if response.status_code in (200, 201):
            return
        if response.status_code >= 500:
            raise AuthError(AuthErrorKind.SERVER_FAULT, _error_message(response))
        if response.status_code in (400, 409):
            raise AuthError(AuthErrorKind.DUPLICATE_EMAIL, _error_message(response))
        # rejected input (e.g. malformed email)
        raise AuthError(AuthErrorKind.INVALID_CREDENTIALS, _error_message(response))

    async def login(self, email: str, password: str) -> Dict[str, str]:
        """Return ``{"token": ..., "email": ...}`` on success."""
        response = await self._post("/login", email, password)
        if response.status_code >= 500:
            raise AuthError(AuthErrorKind.SERVER_FAULT, _error_message(response))
        if response.status_code != 200:
            raise AuthError(AuthErrorKind.INVALID_CREDENTIALS, _error_message(response))
        try:
            payload = response.json()
            return {"token": str(payload["token"]), "email": str(payload["email"])}
        except (json.JSONDecodeError, KeyError, TypeError) as exc:
            raise AuthError(AuthErrorKind.SERVER_FAULT, "malformed login response") from exc


class RemoteNoteApi:
    """Note CRUD. Raises SessionError on 401/403 and TransportError on anything else that fails."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _request(self, method: str, path: str, token: str, json_body: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json_body, headers=_auth_headers(token))
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        if response.status_code == 401:
            raise SessionError(SessionErrorKind.EXPIRED, _error_message(response))
        if response.status_code == 403:
            raise SessionError(SessionErrorKind.FORBIDDEN, _error_message(response))
        if not 200 <= response.status_code < 300:
            raise TransportError(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except json.JSONDecodeError:
            return None

    async def list_notes(self, token: str) -> list[Note]:
        payload = await self._request("GET", NOTES_PREFIX, token)
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise TransportError("malformed note list: expected an array")
        notes: list[Note] = []
        for item in payload:
            try:
                notes.append(Note.model_validate(item))
            except ValueError as exc:
                # one unreadable row must not hide the rest of the collection
                logger.warning("skipping malformed note %r: %s", item.get("id") if isinstance(item, dict) else item, exc)
        return notes

    async def create_note(self, token: str, note: Note) -> None:
        await self._request("POST", NOTES_PREFIX, token, json_body=note.to_dict())

    async def update_status(self, token: str, note_id: str, status: NoteStatus) -> None:
        await self._request("PUT", f"{NOTES_PREFIX}/{note_id}", token, json_body={"status": status.value})

    async def delete_note(self, token: str, note_id: str) -> None:
        await self._request("DELETE", f"{NOTES_PREFIX}/{note_id}", token)
