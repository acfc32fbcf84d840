"""
Health Routes - Health check endpoints
"""
from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    configured = getattr(request.app.state, "inference_client", None) is not None
    return {"status": "ok", "message": "Server is alive", "inference_configured": configured}
