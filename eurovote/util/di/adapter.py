"""Adapter DI providers."""

from dishka import Scope, provide

from eurovote.adapter.api import ActsApi, GuestsApi, PartiesApi, UsersApi, VotesApi
from eurovote.adapter.gateway.client import GatewayClient
from eurovote.util.di.base import ProviderBase


class ProdAdapterProvider(ProviderBase):
    """API resources over the shared gateway - concrete, no mocks needed.

    Mocking happens one level down, in the gateway transport.
    """

    scope = Scope.APP

    @provide
    def get_acts_api(self, gateway: GatewayClient) -> ActsApi:
        return ActsApi(gateway)

    @provide
    def get_guests_api(self, gateway: GatewayClient) -> GuestsApi:
        return GuestsApi(gateway)

    @provide
    def get_parties_api(self, gateway: GatewayClient) -> PartiesApi:
        return PartiesApi(gateway)

    @provide
    def get_votes_api(self, gateway: GatewayClient) -> VotesApi:
        return VotesApi(gateway)

    @provide
    def get_users_api(self, gateway: GatewayClient) -> UsersApi:
        return UsersApi(gateway)
