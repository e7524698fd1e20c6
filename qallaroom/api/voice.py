"""
Voice REST API: query who is in which voice room.

Endpoints:
  GET /api/voice/rooms   → every live room with its member connection ids
"""

from fastapi import APIRouter, Depends

from qallaroom.api.deps import get_relay_state
from qallaroom.schemas.voice import VoiceRoomResponse
from qallaroom.state import RelayState

router = APIRouter(prefix="/voice", tags=["voice"])


@router.get("/rooms", response_model=list[VoiceRoomResponse])
async def list_voice_rooms(state: RelayState = Depends(get_relay_state)) -> list[VoiceRoomResponse]:
    return [VoiceRoomResponse(room=room, peers=peers) for room, peers in state.voice.rooms().items()]
