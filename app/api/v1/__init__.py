# app/api/v1/__init__.py

from fastapi import APIRouter

from ...config import get_settings
from . import players, rooms, facts, guesses, stats, flow, debug

api_router = APIRouter()

# それぞれの router 側で prefix を持っている前提にする
api_router.include_router(players.router)   # /players
api_router.include_router(rooms.router)     # /rooms
api_router.include_router(facts.router)     # /rooms/{room_id}/facts
api_router.include_router(guesses.router)   # /rooms/{room_id}/guesses
api_router.include_router(stats.router)     # /rooms/{room_id}/stats
api_router.include_router(flow.router)      # /flow

# 開発用（ENABLE_DEBUG_ROUTES=true のときだけ）
if get_settings().enable_debug_routes:
    api_router.include_router(debug.router)
