"""
FastAPI dependencies that hand the application's store to request handlers
"""

from fastapi import HTTPException, Request, status

from vrms.store.store import DomainStore


def get_store(request: Request) -> DomainStore:
    """The DomainStore created by the application lifespan"""
    store = getattr(request.app.state, "store", None)
    if store is None or store.closed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Store is not available",
        )
    return store
