# app/client/standup_client.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date as date_type
from http import HTTPStatus
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from app.client.session import UserSession
from app.schemas.enums import BlockerStatus
from app.schemas.standup import (
    BlockerStatusUpdate,
    StandupCreate,
    StandupRead,
    StandupSummary,
    StandupUpdate,
    SubmissionStatus,
    TeamSubmissionStatus,
)
from app.schemas.user import UserRead

logger = logging.getLogger(__name__)


class StandupClientError(RuntimeError):
    """
    Raised when a StandupBot API call fails.

    `status_code` is None for failures detected before any request was sent.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class StandupClientState:
    """
    Client-side view state, updated as calls complete.

    - `loading` is true only while a call is in flight.
    - `error` holds the last failure message exactly as the server sent it.
    - `is_edit_mode` is true once today's standup is known, meaning the next
      save should be an update rather than a create.
    """

    today_standup: StandupRead | None = None
    history: list[StandupSummary] = field(default_factory=list)
    loading: bool = False
    error: str | None = None
    has_submitted_today: bool = False

    @property
    def is_edit_mode(self) -> bool:
        return self.today_standup is not None


class StandupApiClient:
    """
    Typed async client for the StandupBot HTTP API.

    Responsibilities
    ----------------
    - Mirror each endpoint as a method returning the API's pydantic schemas.
    - Keep `state` in sync with the results for display purposes.
    - Surface server error messages verbatim via StandupClientError.

    Notes
    -----
    - A fresh httpx.AsyncClient is opened per call; pass `transport` to route
      requests somewhere other than the network (tests use httpx.MockTransport).
    - No retries or request de-duplication.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self.state = StandupClientState()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _tracking(self) -> AsyncIterator[None]:
        self.state.loading = True
        self.state.error = None
        try:
            yield
        finally:
            self.state.loading = False

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> httpx.Response:
        url = f"{self._base_url}/{path.lstrip('/')}"
        async with httpx.AsyncClient(
            timeout=self._timeout_seconds,
            transport=self._transport,
        ) as client:
            return await client.request(
                method=method.upper(),
                url=url,
                params=params,
                json=json,
                headers={"Accept": "application/json"},
            )

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("detail"):
            return str(payload["detail"])
        return resp.text or f"Request failed with status {resp.status_code}"

    def _fail(self, resp: httpx.Response) -> StandupClientError:
        message = self._error_message(resp)
        self.state.error = message
        logger.warning(
            "%s %s failed (status=%s): %s",
            resp.request.method,
            resp.request.url.path,
            resp.status_code,
            message,
        )
        return StandupClientError(message, status_code=resp.status_code)

    async def _call(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        resp = await self._request(method, path, params=params, json=json)
        if resp.status_code // 100 != 2:
            raise self._fail(resp)
        return resp.json()

    # ------------------------------------------------------------------
    # Standups
    # ------------------------------------------------------------------

    async def get_today_standup(self, user_id: int) -> StandupRead | None:
        """
        Fetch today's standup; None (not an error) when nothing was submitted.
        """
        async with self._tracking():
            resp = await self._request("GET", f"/standups/today/{user_id}")
            if resp.status_code == HTTPStatus.NOT_FOUND:
                self.state.today_standup = None
                self.state.has_submitted_today = False
                return None
            if resp.status_code // 100 != 2:
                raise self._fail(resp)

            standup = StandupRead.model_validate(resp.json())
            self.state.today_standup = standup
            self.state.has_submitted_today = True
            return standup

    async def get_history(self, user_id: int, count: int = 10) -> list[StandupSummary]:
        async with self._tracking():
            data = await self._call(
                "GET", f"/standups/history/{user_id}", params={"count": count}
            )
            history = [StandupSummary.model_validate(item) for item in data]
            self.state.history = history
            return history

    async def get_team_standups(
        self,
        team_id: int,
        on_date: date_type | None = None,
    ) -> list[StandupRead]:
        params = {"date": on_date.isoformat()} if on_date is not None else None
        async with self._tracking():
            data = await self._call("GET", f"/standups/team/{team_id}", params=params)
            return [StandupRead.model_validate(item) for item in data]

    async def create(self, user_id: int, request: StandupCreate) -> StandupRead:
        async with self._tracking():
            data = await self._call(
                "POST",
                f"/standups/{user_id}",
                json=request.model_dump(by_alias=True, mode="json"),
            )
            standup = StandupRead.model_validate(data)
            self.state.today_standup = standup
            self.state.has_submitted_today = True
            return standup

    async def update(self, user_id: int, request: StandupUpdate) -> StandupRead:
        """
        Send a partial update. Only fields explicitly set on `request` are
        transmitted, so omitted fields stay untouched on the server.
        """
        async with self._tracking():
            data = await self._call(
                "PUT",
                f"/standups/{user_id}",
                json=request.model_dump(by_alias=True, exclude_unset=True, mode="json"),
            )
            standup = StandupRead.model_validate(data)
            self.state.today_standup = standup
            return standup

    async def save_today(self, session: UserSession, form: StandupCreate) -> StandupRead:
        """
        Submit the standup form for the session user: create on first save of
        the day, update once today's standup is known.
        """
        if self.state.is_edit_mode:
            return await self.update(
                session.user_id, StandupUpdate.model_validate(form.model_dump())
            )
        return await self.create(session.user_id, form)

    async def update_blocker_status(
        self,
        session: UserSession,
        standup_id: int,
        status: BlockerStatus,
    ) -> StandupRead:
        """
        Change a blocker's status. Only team lead sessions may do this; the
        check happens here because the server does not enforce roles.
        """
        if not session.is_team_lead:
            message = "Only team leads can change blocker status."
            self.state.error = message
            raise StandupClientError(message)

        async with self._tracking():
            data = await self._call(
                "PATCH",
                f"/standups/{standup_id}/blocker-status",
                json=BlockerStatusUpdate(status=status).model_dump(by_alias=True, mode="json"),
            )
            standup = StandupRead.model_validate(data)
            if self.state.today_standup is not None and self.state.today_standup.id == standup.id:
                self.state.today_standup = standup
            return standup

    async def get_submission_status(self, user_id: int) -> bool:
        async with self._tracking():
            data = await self._call("GET", f"/standups/status/{user_id}")
            submitted = SubmissionStatus.model_validate(data).has_submitted_today
            self.state.has_submitted_today = submitted
            return submitted

    async def get_team_status(self, team_id: int) -> TeamSubmissionStatus:
        async with self._tracking():
            data = await self._call("GET", f"/standups/team/{team_id}/status")
            return TeamSubmissionStatus.model_validate(data)

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    async def list_users(self) -> list[UserRead]:
        async with self._tracking():
            data = await self._call("GET", "/users")
            return [UserRead.model_validate(item) for item in data]

    async def get_user(self, user_id: int) -> UserRead:
        async with self._tracking():
            data = await self._call("GET", f"/users/{user_id}")
            return UserRead.model_validate(data)

    async def open_session(self, user_id: int) -> UserSession:
        """
        Simulated login: look the user up and start a session for them.

        Client state from any previous session is discarded.
        """
        user = await self.get_user(user_id)
        self.state = StandupClientState()
        return UserSession.from_user(user)
