"""Unit tests for provider selection."""

import pytest

from eurovote.util.di import (
    PROVIDERS,
    GatewayProvider,
    ProdConfigProvider,
    ProdGatewayProvider,
    SessionProvider,
    get_provider,
)
from eurovote.util.di.base import ProviderBase
from eurovote.util.error import DependencyInjectionError
from tests.di import MockGatewayProvider, MockSessionProvider, build_test_container


class TestGetProvider:
    """Tests for get_provider."""

    def test_concrete_provider_used_as_is(self):
        """Should return providers without implementations unchanged."""
        assert get_provider(ProdConfigProvider) is ProdConfigProvider

    def test_selects_by_mock_flag(self):
        """Should pick production or mock implementation."""
        assert get_provider(GatewayProvider) is ProdGatewayProvider
        assert get_provider(GatewayProvider, use_mock=True) is MockGatewayProvider
        assert get_provider(SessionProvider, use_mock=True) is MockSessionProvider

    def test_missing_implementation(self):
        """Should raise when no implementation matches."""

        class ExampleProvider(ProviderBase):
            __mock_component__ = "gateway"

        class ProdExampleProvider(ExampleProvider):
            __is_mock__ = False

        with pytest.raises(DependencyInjectionError, match="No mock implementation for gateway") as exc_info:
            get_provider(ExampleProvider, use_mock=True)

        assert exc_info.value.component == "gateway"
        assert exc_info.value.use_mock is True

    def test_every_component_has_both_implementations(self):
        """Should offer prod and mock for every mockable provider."""
        for base in PROVIDERS:
            if base.__subclasses__():
                get_provider(base, use_mock=False)
                get_provider(base, use_mock=True)


class TestBuildTestContainer:
    """Tests for the test container builder."""

    def test_unknown_component(self):
        """Should refuse to unmock unknown components."""
        with pytest.raises(ValueError, match="Unknown components"):
            build_test_container(unmock={"database"})
