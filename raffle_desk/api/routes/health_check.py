from fastapi import APIRouter

from raffle_desk.api.error import success_envelope

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe"""
    return success_envelope({"status": "ok"})
