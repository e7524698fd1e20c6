"""
Channel REST endpoints (read-only).

GET /api/channels                         → static channel catalog
GET /api/channels/{channel_id}/messages   → current in-memory history
"""

from fastapi import APIRouter, Depends, HTTPException, status

from qallaroom.api.deps import get_relay_state
from qallaroom.schemas.channel import Channel, HistoryResponse
from qallaroom.state import RelayState

router = APIRouter(prefix="/channels", tags=["channels"])


@router.get("", response_model=list[Channel])
async def list_channels(state: RelayState = Depends(get_relay_state)) -> list[Channel]:
    return state.history.channels


@router.get("/{channel_id}/messages", response_model=HistoryResponse)
async def get_channel_history(
    channel_id: str,
    state: RelayState = Depends(get_relay_state),
) -> HistoryResponse:
    if not state.history.has_channel(channel_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")
    return HistoryResponse(channel_id=channel_id, messages=state.history.replay(channel_id))
