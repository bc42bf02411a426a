"""In-memory party backend for testing and offline demos.

Implements the party API routes behind an ``httpx.MockTransport`` so the
real gateway, resources and coordinators run unchanged against it. The
moderator side is driven directly through methods such as
``set_guest_status`` and ``close_party``, mirroring a human acting on
their own schedule.
"""

import json
import re
import secrets
import string
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import httpx
import jwt

from eurovote.domain.service.vote_codec import POINT_VALUES
from eurovote.domain.value import EventType, GuestStatus, PartyStatus

Handler = Callable[..., Awaitable[httpx.Response]]

DEFAULT_ACTS: dict[str, list[tuple[str, str, str]]] = {
    EventType.GRAND_FINAL.value: [
        ("Sweden", "Loreen", "Tattoo"),
        ("Finland", "Käärijä", "Cha Cha Cha"),
        ("Israel", "Noa Kirel", "Unicorn"),
        ("Italy", "Marco Mengoni", "Due vite"),
        ("Norway", "Alessandra", "Queen of Kings"),
        ("Ukraine", "Tvorchi", "Heart of Steel"),
        ("Belgium", "Gustaph", "Because of You"),
        ("Estonia", "Alika", "Bridges"),
        ("Australia", "Voyager", "Promise"),
        ("Czechia", "Vesna", "My Sister's Crown"),
        ("Lithuania", "Monika Linkytė", "Stay"),
        ("Cyprus", "Andrew Lambrou", "Break a Broken Heart"),
    ],
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Reject(Exception):
    """Abort the current route with an error status."""

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        self.message = message
        super().__init__(message)


class InMemoryPartyBackend:
    """Party API served from dictionaries.

    Attributes:
        requests: Every request received, in order
        json_errors: Send ``{"error": ...}`` bodies instead of plain text
        require_complete_votes: Reject votes that do not use all ten values
    """

    def __init__(
        self,
        json_errors: bool = False,
        require_complete_votes: bool = True,
    ) -> None:
        self.json_errors = json_errors
        self.require_complete_votes = require_complete_votes
        self.requests: list[httpx.Request] = []

        self.parties: dict[str, dict[str, Any]] = {}
        self.guests: dict[str, dict[str, Any]] = {}
        self.votes: dict[tuple[str, str], dict[str, Any]] = {}
        self.users: dict[str, dict[str, Any]] = {}
        self.acts: dict[str, list[dict[str, Any]]] = {}

        # Injected failures: list of (route name or None, status or None)
        self._failures: list[tuple[str | None, int | None]] = []
        self._gates: dict[str, list[Callable[[], Awaitable[None]]]] = {}

        for event, acts in DEFAULT_ACTS.items():
            self.seed_acts(EventType(event), acts)

        self._routes: list[tuple[str, re.Pattern[str], str, Handler]] = [
            ("GET", re.compile(r"^/api/acts$"), "list_acts", self._list_acts),
            ("GET", re.compile(r"^/api/users/profile$"), "get_profile", self._get_profile),
            ("PUT", re.compile(r"^/api/users/profile$"), "update_profile", self._update_profile),
            ("POST", re.compile(r"^/api/parties$"), "create_party", self._create_party),
            ("GET", re.compile(r"^/api/parties$"), "list_parties", self._list_parties),
            ("GET", re.compile(r"^/api/parties/([^/]+)$"), "get_party", self._get_party),
            ("DELETE", re.compile(r"^/api/parties/([^/]+)$"), "delete_party", self._delete_party),
            ("POST", re.compile(r"^/api/parties/([^/]+)/join$"), "join", self._join),
            ("GET", re.compile(r"^/api/parties/([^/]+)/guest-status$"), "guest_status", self._guest_status),
            ("GET", re.compile(r"^/api/parties/([^/]+)/guests$"), "list_guests", self._list_guests),
            ("GET", re.compile(r"^/api/parties/([^/]+)/join-requests$"), "join_requests", self._join_requests),
            ("PUT", re.compile(r"^/api/parties/([^/]+)/guests/([^/]+)/approve$"), "approve", self._approve),
            ("PUT", re.compile(r"^/api/parties/([^/]+)/guests/([^/]+)/reject$"), "reject", self._reject),
            ("DELETE", re.compile(r"^/api/parties/([^/]+)/guests/([^/]+)$"), "remove_guest", self._remove_guest),
            ("POST", re.compile(r"^/api/parties/([^/]+)/votes$"), "submit_vote", self._submit_vote),
            ("PUT", re.compile(r"^/api/parties/([^/]+)/votes$"), "update_vote", self._update_vote),
            ("GET", re.compile(r"^/api/parties/([^/]+)/votes/([^/]+)$"), "get_vote", self._get_vote),
            ("POST", re.compile(r"^/api/parties/([^/]+)/end-voting$"), "end_voting", self._end_voting),
            ("GET", re.compile(r"^/api/parties/([^/]+)/results$"), "results", self._results),
        ]

    @property
    def transport(self) -> httpx.MockTransport:
        """Transport to hand to ``GatewayClient``."""
        return httpx.MockTransport(self.handle)

    # --- Test controls ---

    def fail_next(
        self, count: int = 1, *, route: str | None = None, status: int | None = None
    ) -> None:
        """Make the next ``count`` matching requests fail.

        Args:
            count: Number of requests to fail
            route: Route name to match (e.g. ``"guest_status"``), None for any
            status: Status to answer with, None for a connection error
        """
        self._failures.extend([(route, status)] * count)

    def hold_next(self, route: str, gate: Callable[[], Awaitable[None]]) -> None:
        """Await ``gate`` before answering the next request to ``route``."""
        self._gates.setdefault(route, []).append(gate)

    def calls(self, route: str) -> int:
        """Number of requests that matched ``route``."""
        return sum(1 for r in self.requests if self._match(r)[0] == route)

    # --- Moderator side ---

    def create_party(
        self,
        name: str = "Eurovision Finals",
        event_type: EventType = EventType.GRAND_FINAL,
        admin_id: str = "admin-1",
        code: str | None = None,
    ) -> dict[str, Any]:
        party = {
            "id": f"party-{uuid4().hex[:8]}",
            "name": name,
            "code": code or self._new_code(),
            "eventType": EventType(event_type).value,
            "adminId": admin_id,
            "status": PartyStatus.ACTIVE.value,
            "createdAt": _now(),
        }
        self.parties[party["id"]] = party
        return party

    def set_guest_status(self, guest_id: str, status: GuestStatus) -> None:
        self.guests[guest_id]["status"] = GuestStatus(status).value

    def close_party(self, party_id: str) -> None:
        self.parties[party_id]["status"] = PartyStatus.CLOSED.value

    def seed_acts(
        self, event_type: EventType, acts: list[tuple[str, str, str]]
    ) -> list[dict[str, Any]]:
        """Replace the acts of an event, numbered in the given order."""
        event = EventType(event_type).value
        self.acts[event] = [
            {
                "id": f"act-{event}-{index}",
                "country": country,
                "artist": artist,
                "song": song,
                "runningOrder": index,
                "eventType": event,
            }
            for index, (country, artist, song) in enumerate(acts, start=1)
        ]
        return self.acts[event]

    def add_guest(
        self, party_id: str, username: str, status: GuestStatus = GuestStatus.PENDING
    ) -> dict[str, Any]:
        guest = {
            "id": f"guest-{uuid4().hex[:8]}",
            "partyId": party_id,
            "username": username,
            "status": GuestStatus(status).value,
            "createdAt": _now(),
        }
        self.guests[guest["id"]] = guest
        return guest

    def set_vote(self, party_id: str, guest_id: str, votes: dict[str, str]) -> dict[str, Any]:
        vote = {
            "id": f"vote-{uuid4().hex[:8]}",
            "guestId": guest_id,
            "partyId": party_id,
            "votes": dict(votes),
            "createdAt": _now(),
        }
        self.votes[(party_id, guest_id)] = vote
        return vote

    # --- Transport ---

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route, handler, params = self._match(request)

        for index, (failing_route, status) in enumerate(self._failures):
            if failing_route is None or failing_route == route:
                del self._failures[index]
                if status is None:
                    raise httpx.ConnectError("Connection refused", request=request)
                return self._error(status)

        gates = self._gates.get(route or "")
        if gates:
            await gates.pop(0)()

        if handler is None:
            return self._error(404)

        try:
            status, payload = await handler(request, *params)
        except _Reject as e:
            return self._error(e.status, e.message)

        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def _match(
        self, request: httpx.Request
    ) -> tuple[str | None, Handler | None, tuple[str, ...]]:
        path = request.url.path
        for method, pattern, name, handler in self._routes:
            if request.method != method:
                continue
            match = pattern.match(path)
            if match:
                return name, handler, match.groups()
        return None, None, ()

    def _error(self, status: int, message: str | None = None) -> httpx.Response:
        text = message or httpx.codes.get_reason_phrase(status)
        if self.json_errors:
            return httpx.Response(status, json={"error": text})
        return httpx.Response(
            status,
            text=f"{text}\n",
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )

    # --- Helpers ---

    def _new_code(self) -> str:
        alphabet = string.ascii_uppercase + string.digits
        while True:
            code = "".join(secrets.choice(alphabet) for _ in range(6))
            if self._party_by_code(code) is None:
                return code

    def _party_by_code(self, code: str) -> dict[str, Any] | None:
        for party in self.parties.values():
            if party["code"] == code:
                return party
        return None

    def _subject(self, request: httpx.Request) -> str | None:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        try:
            claims = jwt.decode(
                header.removeprefix("Bearer "), options={"verify_signature": False}
            )
        except jwt.InvalidTokenError:
            raise _Reject(401)
        return claims.get("sub")

    def _require_subject(self, request: httpx.Request) -> str:
        subject = self._subject(request)
        if subject is None:
            raise _Reject(401)
        return subject

    def _owned_party(self, request: httpx.Request, party_id: str) -> dict[str, Any]:
        subject = self._require_subject(request)
        party = self.parties.get(party_id)
        if party is None:
            raise _Reject(404)
        if party["adminId"] != subject:
            raise _Reject(403)
        return party

    def _party(self, party_id: str) -> dict[str, Any]:
        party = self.parties.get(party_id)
        if party is None:
            raise _Reject(404)
        return party

    def _guest_in(self, party_id: str, guest_id: str) -> dict[str, Any]:
        guest = self.guests.get(guest_id)
        if guest is None or guest["partyId"] != party_id:
            raise _Reject(404)
        return guest

    @staticmethod
    def _body(request: httpx.Request) -> dict[str, Any]:
        try:
            body = json.loads(request.content or b"{}")
        except ValueError:
            raise _Reject(400)
        if not isinstance(body, dict):
            raise _Reject(400)
        return body

    @staticmethod
    def _public(party: dict[str, Any]) -> dict[str, Any]:
        return {k: party[k] for k in ("id", "name", "code", "eventType", "status")}

    def _check_votes(self, votes: Any) -> dict[str, str]:
        if not isinstance(votes, dict):
            raise _Reject(400)
        allowed = {str(points) for points in POINT_VALUES}
        if set(votes) - allowed:
            raise _Reject(400, "invalid point value")
        targets = [act_id for act_id in votes.values() if act_id]
        if len(targets) != len(set(targets)):
            raise _Reject(400, "duplicate act id")
        if self.require_complete_votes and len(targets) != len(POINT_VALUES):
            raise _Reject(400, f"exactly {len(POINT_VALUES)} votes required")
        return {k: v for k, v in votes.items() if v}

    # --- Routes ---

    async def _list_acts(self, request: httpx.Request):
        event = request.url.params.get("event", "")
        if event not in {e.value for e in EventType}:
            raise _Reject(400)
        return 200, {"acts": self.acts.get(event, [])}

    async def _get_profile(self, request: httpx.Request):
        subject = self._require_subject(request)
        user = self.users.setdefault(
            subject, {"id": subject, "username": subject, "email": None}
        )
        return 200, user

    async def _update_profile(self, request: httpx.Request):
        subject = self._require_subject(request)
        username = str(self._body(request).get("username", "")).strip()
        if not username:
            raise _Reject(400)
        user = self.users.setdefault(
            subject, {"id": subject, "username": subject, "email": None}
        )
        user["username"] = username
        return 200, user

    async def _create_party(self, request: httpx.Request):
        subject = self._require_subject(request)
        body = self._body(request)
        name = str(body.get("name", "")).strip()
        if not name or body.get("eventType") not in {e.value for e in EventType}:
            raise _Reject(400)
        return 201, self.create_party(name, EventType(body["eventType"]), subject)

    async def _list_parties(self, request: httpx.Request):
        subject = self._require_subject(request)
        return 200, [p for p in self.parties.values() if p["adminId"] == subject]

    async def _get_party(self, request: httpx.Request, key: str):
        party = self._party_by_code(key)
        if party is not None:
            return 200, self._public(party)
        return 200, self._owned_party(request, key)

    async def _delete_party(self, request: httpx.Request, party_id: str):
        self._owned_party(request, party_id)
        del self.parties[party_id]
        return 204, None

    async def _join(self, request: httpx.Request, code: str):
        party = self._party_by_code(code)
        if party is None:
            raise _Reject(404)
        if party["status"] == PartyStatus.CLOSED.value:
            raise _Reject(409, "party is closed")
        username = str(self._body(request).get("username", "")).strip()
        if not username:
            raise _Reject(400)
        return 201, self.add_guest(party["id"], username)

    async def _guest_status(self, request: httpx.Request, code: str):
        guest_id = request.url.params.get("guestId")
        if not guest_id:
            raise _Reject(400)
        party = self._party_by_code(code)
        if party is None:
            raise _Reject(404)
        return 200, self._guest_in(party["id"], guest_id)

    async def _list_guests(self, request: httpx.Request, party_id: str):
        if self._subject(request) is not None:
            self._owned_party(request, party_id)
            return 200, [g for g in self.guests.values() if g["partyId"] == party_id]

        guest_id = request.url.params.get("guestId")
        if not guest_id:
            raise _Reject(401)
        self._party(party_id)
        if not self._guest_in(party_id, guest_id)["status"] == GuestStatus.APPROVED.value:
            raise _Reject(403)
        return 200, [
            g
            for g in self.guests.values()
            if g["partyId"] == party_id and g["status"] == GuestStatus.APPROVED.value
        ]

    async def _join_requests(self, request: httpx.Request, party_id: str):
        self._owned_party(request, party_id)
        return 200, [
            g
            for g in self.guests.values()
            if g["partyId"] == party_id and g["status"] == GuestStatus.PENDING.value
        ]

    async def _approve(self, request: httpx.Request, party_id: str, guest_id: str):
        self._owned_party(request, party_id)
        self._guest_in(party_id, guest_id)
        self.set_guest_status(guest_id, GuestStatus.APPROVED)
        return 200, {"status": "ok"}

    async def _reject(self, request: httpx.Request, party_id: str, guest_id: str):
        self._owned_party(request, party_id)
        self._guest_in(party_id, guest_id)
        self.set_guest_status(guest_id, GuestStatus.REJECTED)
        return 200, {"status": "ok"}

    async def _remove_guest(self, request: httpx.Request, party_id: str, guest_id: str):
        self._owned_party(request, party_id)
        self._guest_in(party_id, guest_id)
        del self.guests[guest_id]
        self.votes.pop((party_id, guest_id), None)
        return 204, None

    async def _write_vote(self, request: httpx.Request, party_id: str, create: bool):
        party = self._party(party_id)
        body = self._body(request)
        guest = self._guest_in(party_id, str(body.get("guestId", "")))
        if guest["status"] != GuestStatus.APPROVED.value:
            raise _Reject(403)
        if party["status"] == PartyStatus.CLOSED.value:
            raise _Reject(403, "voting is closed")

        votes = self._check_votes(body.get("votes"))
        key = (party_id, guest["id"])
        if create and key in self.votes:
            raise _Reject(409, "vote already submitted")
        if not create and key not in self.votes:
            raise _Reject(404)

        vote = self.set_vote(party_id, guest["id"], votes)
        return (201 if create else 200), vote

    async def _submit_vote(self, request: httpx.Request, party_id: str):
        return await self._write_vote(request, party_id, create=True)

    async def _update_vote(self, request: httpx.Request, party_id: str):
        return await self._write_vote(request, party_id, create=False)

    async def _get_vote(self, request: httpx.Request, party_id: str, guest_id: str):
        self._party(party_id)
        vote = self.votes.get((party_id, guest_id))
        if vote is None:
            raise _Reject(404)
        return 200, vote

    async def _end_voting(self, request: httpx.Request, party_id: str):
        party = self._owned_party(request, party_id)
        self.close_party(party_id)
        return 200, {"id": party["id"], "status": party["status"]}

    async def _results(self, request: httpx.Request, party_id: str):
        party = self._party(party_id)
        acts = self.acts.get(party["eventType"], [])
        totals = {act["id"]: 0 for act in acts}
        voters = 0
        for (vote_party, _), vote in self.votes.items():
            if vote_party != party_id:
                continue
            voters += 1
            for points, act_id in vote["votes"].items():
                if act_id in totals:
                    totals[act_id] += int(points)

        ranked = sorted(acts, key=lambda a: (-totals[a["id"]], a["runningOrder"]))
        results = [
            {
                "actId": act["id"],
                "country": act["country"],
                "artist": act["artist"],
                "song": act["song"],
                "totalPoints": totals[act["id"]],
                "rank": rank,
            }
            for rank, act in enumerate(ranked, start=1)
        ]
        return 200, {
            "partyId": party_id,
            "partyName": party["name"],
            "totalVoters": voters,
            "results": results,
        }
