"""Party use cases."""

from .get_results import GetResultsRequest, GetResultsResponse, GetResultsUseCase

__all__ = [
    "GetResultsRequest",
    "GetResultsResponse",
    "GetResultsUseCase",
]
