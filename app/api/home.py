from fastapi import APIRouter

router = APIRouter()


@router.get("/", summary="Home", description="Public landing document.")
async def home():
    return {
        "name": "Sensei",
        "description": "Personalized career coaching.",
        "sign_in": "/sign-in",
        "onboarding": "/onboarding",
    }
