from fastapi import APIRouter

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness probe; exempt from the route gate.")
async def health_check():
    return {"status": "healthy"}
