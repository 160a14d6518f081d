from fastapi import APIRouter, Depends, HTTPException

from app.core.dependencies import get_user_store
from app.core.security import require_user_id
from app.schemas.onboarding import UserProfile
from app.users.store import UserStore

router = APIRouter()


@router.get("/profile", response_model=UserProfile)
def get_profile(
    user_id: str = Depends(require_user_id),
    store: UserStore = Depends(get_user_store),
):
    profile = store.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found.")
    return profile
