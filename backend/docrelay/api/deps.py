"""Shared FastAPI dependencies."""

from fastapi import HTTPException, Request, status

from ..connections.manager import ConnectionManager


def get_manager(request: Request) -> ConnectionManager:
    manager = getattr(request.app.state, "manager", None)
    if manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is still starting"
        )
    return manager
