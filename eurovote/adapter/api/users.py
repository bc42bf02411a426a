"""Moderator profile resource."""

from eurovote.adapter.gateway.client import GatewayClient
from eurovote.domain.model import User


class UsersApi:
    """Profile of the signed-in moderator."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def get_profile(self) -> User:
        data = await self.gateway.request(
            "/api/users/profile", requires_credential=True
        )
        return User.model_validate(data)

    async def update_profile(self, username: str) -> User:
        data = await self.gateway.request(
            "/api/users/profile",
            method="PUT",
            body={"username": username},
            requires_credential=True,
        )
        return User.model_validate(data)
