from fastapi import Request

from qallaroom.state import RelayState


def get_relay_state(request: Request) -> RelayState:
    """The process-wide relay state created in the app lifespan."""
    return request.app.state.relay
