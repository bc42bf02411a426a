"""Vote codec.

Converts between the in-memory assignment (point value -> act id) and the
wire mapping keyed by the decimal point value, and evaluates the ballot
rules the client checks before submitting:

- each point value maps to at most one act (dict keys)
- each act receives at most one point value
- a vote is complete when all ten point values are assigned

Completeness is a display signal only, partial ballots may be saved.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Self

from pydantic import BaseModel, Field

from eurovote.domain.error import ValidationError
from eurovote.domain.model import Act, Vote
from eurovote.domain.value import ActId
from eurovote.domain.value.common import ValueObject

logger = logging.getLogger(__name__)

# Descending, the order in which points are awarded and displayed
POINT_VALUES: tuple[int, ...] = (12, 10, 8, 7, 6, 5, 4, 3, 2, 1)

Assignment = Mapping[int, ActId]


class VoteEntry(ValueObject):
    """One awarded point value, resolved against the act list when possible."""

    points: int
    act_id: ActId
    act: Act | None = None

    @property
    def label(self) -> str:
        """Country of the act, or the raw id if the act is unknown."""
        return self.act.country if self.act else self.act_id


def encode_assignment(assignment: Assignment) -> dict[str, str]:
    """Encode an assignment for submission.

    Args:
        assignment: Point value -> act id, possibly sparse

    Returns:
        Wire mapping keyed by decimal point value, unassigned points omitted

    Raises:
        ValidationError: If a key is not one of the fixed point values
    """
    foreign = set(assignment) - set(POINT_VALUES)
    if foreign:
        raise ValidationError(f"Invalid point values: {sorted(foreign)}")

    return {
        str(points): act_id
        for points in POINT_VALUES
        if (act_id := assignment.get(points))
    }


def decode_assignment(wire: Mapping[str, str]) -> dict[int, ActId]:
    """Decode a wire mapping into point-indexed lookups.

    Keys that are not one of the fixed point values and empty targets are
    skipped, the server is not guaranteed to send clean data.

    Args:
        wire: Mapping keyed by decimal point value

    Returns:
        Point value -> act id, only assigned points present
    """
    assignment: dict[int, ActId] = {}
    for key, act_id in wire.items():
        try:
            points = int(key)
        except (TypeError, ValueError):
            logger.warning(f"Skipping vote key that is not a number: {key!r}")
            continue
        if points not in POINT_VALUES:
            logger.warning(f"Skipping unknown point value: {points}")
            continue
        if not act_id:
            continue
        assignment[points] = ActId(act_id)
    return assignment


def is_complete(assignment: Assignment) -> bool:
    """True iff every point value has an act."""
    return all(assignment.get(points) for points in POINT_VALUES)


def duplicate_targets(assignment: Assignment) -> dict[ActId, list[int]]:
    """Find acts that were given more than one point value.

    Returns:
        Act id -> point values (descending) for every act listed twice or more
    """
    by_act: dict[ActId, list[int]] = defaultdict(list)
    for points in POINT_VALUES:
        act_id = assignment.get(points)
        if act_id:
            by_act[act_id].append(points)
    return {act_id: pts for act_id, pts in by_act.items() if len(pts) > 1}


def validate_assignment(assignment: Assignment) -> None:
    """Check the client-side ballot rules before submission.

    Completeness is not checked.

    Raises:
        ValidationError: On unknown point values or an act given points twice
    """
    foreign = set(assignment) - set(POINT_VALUES)
    if foreign:
        raise ValidationError(f"Invalid point values: {sorted(foreign)}")

    duplicates = duplicate_targets(assignment)
    if duplicates:
        details = ", ".join(
            f"{act_id} ({'/'.join(str(p) for p in pts)})"
            for act_id, pts in duplicates.items()
        )
        raise ValidationError(f"Acts given more than one point value: {details}")


def project_vote_entries(
    assignment: Assignment, acts: Iterable[Act] = ()
) -> list[VoteEntry]:
    """List the awarded points for display.

    Walks the point values from 12 down and emits only the assigned ones,
    so a partial vote renders in a sensible order.

    Args:
        assignment: Point value -> act id
        acts: Known acts used to resolve ids

    Returns:
        Entries in descending point order
    """
    act_by_id = {act.id: act for act in acts}
    return [
        VoteEntry(points=points, act_id=act_id, act=act_by_id.get(act_id))
        for points in POINT_VALUES
        if (act_id := assignment.get(points))
    ]


class Ballot(BaseModel):
    """Editable, possibly partial assignment.

    Assigning an act that already holds other points moves it, so the
    one-act-one-value rule holds at every step.
    """

    assignment: dict[int, ActId] = Field(default_factory=dict)

    @classmethod
    def from_vote(cls, vote: Vote | None) -> Self:
        """Start editing from a stored vote, or from scratch."""
        if vote is None:
            return cls()
        return cls(assignment=decode_assignment(vote.votes))

    def assign(self, points: int, act_id: ActId) -> None:
        """Give ``points`` to ``act_id``.

        Raises:
            ValidationError: If ``points`` is not one of the fixed point values
        """
        if points not in POINT_VALUES:
            raise ValidationError(f"Invalid point value: {points}")

        previous = self.points_for(act_id)
        if previous is not None:
            del self.assignment[previous]
        self.assignment[points] = act_id

    def clear(self, points: int) -> None:
        self.assignment.pop(points, None)

    def act_for(self, points: int) -> ActId | None:
        return self.assignment.get(points)

    def points_for(self, act_id: ActId) -> int | None:
        for points, assigned in self.assignment.items():
            if assigned == act_id:
                return points
        return None

    @property
    def remaining_points(self) -> list[int]:
        """Point values still to be awarded, descending."""
        return [points for points in POINT_VALUES if points not in self.assignment]

    @property
    def is_complete(self) -> bool:
        return is_complete(self.assignment)

    def to_wire(self) -> dict[str, str]:
        return encode_assignment(self.assignment)
