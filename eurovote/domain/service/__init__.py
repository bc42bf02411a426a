"""Domain services."""

from .vote_codec import (
    POINT_VALUES,
    Assignment,
    Ballot,
    VoteEntry,
    decode_assignment,
    duplicate_targets,
    encode_assignment,
    is_complete,
    project_vote_entries,
    validate_assignment,
)

__all__ = [
    "POINT_VALUES",
    "Assignment",
    "Ballot",
    "VoteEntry",
    "decode_assignment",
    "duplicate_targets",
    "encode_assignment",
    "is_complete",
    "project_vote_entries",
    "validate_assignment",
]
