"""CLI state container."""

import typing as t

from ..api.client import DatadogClient
from ..config.settings import Settings

ClientFactory = t.Callable[[Settings], DatadogClient]


class CLIState:
    """Application state container for CLI commands.

    Holds Settings and the factory that builds the API client, so tests
    can swap in a mocked client without touching the network.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: ClientFactory | None = None,
    ):
        self.settings = settings
        self._client_factory = client_factory or DatadogClient.from_settings

    def create_client(self) -> DatadogClient:
        """Build a client for the current settings.

        Raises:
            ConfigurationError: If credentials are missing
        """
        return self._client_factory(self.settings)
