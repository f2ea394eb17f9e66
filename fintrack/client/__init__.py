"""Client package: state, gateway, session and controller."""

from fintrack.client.controller import ClientController
from fintrack.client.gateway import ApiGateway, GatewayError
from fintrack.client.session import SessionStore
from fintrack.client.state import ClientState, Notification, NotificationKind, ViewMode

__all__ = [
    "ApiGateway",
    "ClientController",
    "ClientState",
    "GatewayError",
    "Notification",
    "NotificationKind",
    "SessionStore",
    "ViewMode",
]
