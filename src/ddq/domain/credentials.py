"""API credentials attached to every request."""

from dataclasses import dataclass

from pydantic import SecretStr

API_KEY_HEADER = "DD-API-KEY"
APP_KEY_HEADER = "DD-APPLICATION-KEY"


@dataclass(frozen=True)
class Credentials:
    """API and application keys.

    Both are ``SecretStr`` so they render masked in reprs and logs; only
    ``as_headers`` unwraps them.
    """

    api_key: SecretStr
    app_key: SecretStr

    def as_headers(self) -> dict[str, str]:
        return {
            API_KEY_HEADER: self.api_key.get_secret_value(),
            APP_KEY_HEADER: self.app_key.get_secret_value(),
        }
