"""Profile lookup API routes."""

from dataclasses import asdict
from datetime import time

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application
from ...errors import ProfileNotFound


class ProfileResponse(BaseModel):
    """Response model for a stored profile."""

    id: int | None
    recipient_id: str
    city: str
    categories: list[str]
    notification_time: time
    events_interval: int


def create_profiles_router(app: Application) -> APIRouter:
    """Create profiles router."""
    router = APIRouter(prefix="/api", tags=["profiles"])

    @router.get("/profiles", response_model=list[ProfileResponse])
    async def list_profiles() -> list[dict]:
        """List every stored profile."""
        profiles = await app.storage.list_all()
        return [asdict(profile) for profile in profiles]

    @router.get("/profiles/{recipient_id}", response_model=ProfileResponse)
    async def get_profile(recipient_id: str) -> dict:
        """Get the profile of one recipient."""
        try:
            profile = await app.storage.get_by_recipient(recipient_id)
        except ProfileNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        return asdict(profile)

    return router
