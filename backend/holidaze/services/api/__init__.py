"""
Holidaze API gateway: auth session, config and the async client.
The booking core depends only on BookingGateway; HolidazeClient is the real implementation.
"""
from holidaze.services.api.base import BookingGateway
from holidaze.services.api.client import HolidazeClient
from holidaze.services.api.config import ApiConfig
from holidaze.services.api.session import AuthSession, Role


def build_client(settings, *, transport=None) -> HolidazeClient:
    """Client wired from Settings, with the session from HOLIDAZE_ACCESS_TOKEN if present."""
    return HolidazeClient(
        ApiConfig.from_settings(settings),
        AuthSession.from_settings(settings),
        transport=transport,
    )


__all__ = [
    "ApiConfig",
    "AuthSession",
    "BookingGateway",
    "HolidazeClient",
    "Role",
    "build_client",
]
