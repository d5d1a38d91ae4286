"""Control API routes."""

from dataclasses import asdict
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


class DispatchRequest(BaseModel):
    """Optional wall-clock override for a manual tick."""

    now: datetime | None = None


class TickReportResponse(BaseModel):
    """Response model for a dispatch tick."""

    started_at: datetime
    profiles: int
    eligible: int
    notified: int
    messages_sent: int
    failed_sends: int
    catalog_failures: int
    skipped_busy: int


# Global SIM instance (will be set by main app)
_sim_instance: Any = None


def set_sim_instance(sim: Any) -> None:
    """Set the global SIM instance."""
    global _sim_instance
    _sim_instance = sim


def get_sim_instance() -> Any:
    """Get the global SIM instance."""
    return _sim_instance


def create_control_router(app: Application) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/reset", response_model=StatusResponse)
    async def reset_system() -> dict:
        """Reset system data between test runs."""
        try:
            await app.reset()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/dispatch", response_model=TickReportResponse)
    async def dispatch_now(request: DispatchRequest | None = None) -> dict:
        """Run one dispatch tick immediately."""
        now = request.now if request else None
        try:
            report = await app.dispatcher.run_tick(now=now)
            return asdict(report)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/sim/start", response_model=StatusResponse)
    async def start_sim() -> dict:
        """Start SIM simulation."""
        try:
            if _sim_instance:
                await _sim_instance.start()
                return {"status": "ok"}
            else:
                raise HTTPException(status_code=404, detail="SIM not configured")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/sim/stop", response_model=StatusResponse)
    async def stop_sim() -> dict:
        """Stop SIM simulation."""
        try:
            if _sim_instance:
                await _sim_instance.stop()
                return {"status": "ok"}
            else:
                raise HTTPException(status_code=404, detail="SIM not configured")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
