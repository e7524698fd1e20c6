"""
Presence REST endpoint.

GET /api/presence : the current roster, same shape as ``presence:list``
"""

from fastapi import APIRouter, Depends

from qallaroom.api.deps import get_relay_state
from qallaroom.schemas.presence import PresenceEntry
from qallaroom.state import RelayState

router = APIRouter(prefix="/presence", tags=["presence"])


@router.get("", response_model=list[PresenceEntry])
async def get_presence(state: RelayState = Depends(get_relay_state)) -> list[PresenceEntry]:
    return state.presence.roster()
