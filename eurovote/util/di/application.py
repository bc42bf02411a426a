"""Application layer DI providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from eurovote.adapter.api import ActsApi, GuestsApi, PartiesApi, VotesApi
from eurovote.application.coordinator import (
    GuestLifecycleCoordinator,
    PartySyncCoordinator,
)
from eurovote.application.usecase.party import GetResultsUseCase
from eurovote.application.usecase.vote import SubmitVoteUseCase
from eurovote.config import PollingSettings
from eurovote.domain.repository import SessionStore
from eurovote.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application provider - concrete, no mocks needed.

    Coordinators are REQUEST-scoped and closed with the scope, so no timer
    outlives the command that started it.
    """

    # Coordinators
    @provide(scope=Scope.REQUEST)
    async def get_guest_lifecycle_coordinator(
        self,
        guests_api: GuestsApi,
        parties_api: PartiesApi,
        session_store: SessionStore,
        settings: PollingSettings,
    ) -> AsyncIterator[GuestLifecycleCoordinator]:
        """Provide guest lifecycle coordinator."""
        coordinator = GuestLifecycleCoordinator(
            guests_api=guests_api,
            parties_api=parties_api,
            session_store=session_store,
            settings=settings,
        )
        yield coordinator
        await coordinator.close()

    @provide(scope=Scope.REQUEST)
    async def get_party_sync_coordinator(
        self,
        parties_api: PartiesApi,
        guests_api: GuestsApi,
        acts_api: ActsApi,
        votes_api: VotesApi,
        session_store: SessionStore,
        settings: PollingSettings,
    ) -> AsyncIterator[PartySyncCoordinator]:
        """Provide party sync coordinator."""
        coordinator = PartySyncCoordinator(
            parties_api=parties_api,
            guests_api=guests_api,
            acts_api=acts_api,
            votes_api=votes_api,
            session_store=session_store,
            settings=settings,
        )
        yield coordinator
        await coordinator.close()

    # Use cases
    @provide(scope=Scope.REQUEST)
    def get_submit_vote_use_case(self, votes_api: VotesApi) -> SubmitVoteUseCase:
        """Provide submit vote use case."""
        return SubmitVoteUseCase(votes_api=votes_api)

    @provide(scope=Scope.REQUEST)
    def get_get_results_use_case(
        self, parties_api: PartiesApi, votes_api: VotesApi
    ) -> GetResultsUseCase:
        """Provide get results use case."""
        return GetResultsUseCase(parties_api=parties_api, votes_api=votes_api)
