from fastapi import Request, WebSocket

from babelroom.services.container import RelayServices


def get_services(request: Request) -> RelayServices:
    """
    Dependency for getting the app's service container.
    """
    return request.app.state.services


def get_ws_services(websocket: WebSocket) -> RelayServices:
    return websocket.app.state.services
