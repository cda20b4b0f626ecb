from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check():
    """Liveness check. Does not touch Firestore."""
    return {"status": "ok"}
