from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.core.dependencies import get_user_store
from app.core.security import require_user_id
from app.onboarding.industries import find_industry
from app.schemas.onboarding import IndustryOption, OnboardingForm, OnboardingResponse
from app.services.onboarding_service import (
    OnboardingActionError,
    OnboardingValidationError,
    complete_onboarding,
    onboarding_form,
    validate_submission,
)
from app.users.store import UserStore

router = APIRouter()


@router.get("/onboarding", response_model=OnboardingForm)
def get_onboarding_form():
    return onboarding_form()


@router.get("/onboarding/industries/{industry}", response_model=IndustryOption)
def get_industry(industry: str):
    match = find_industry(industry)
    if match is None:
        raise HTTPException(status_code=404, detail="Unknown industry.")
    return IndustryOption(name=match.name, subcategories=list(match.subcategories))


@router.post("/onboarding", response_model=OnboardingResponse)
def submit_onboarding(
    request: Request,
    payload: Any = Body(...),
    user_id: str = Depends(require_user_id),
    store: UserStore = Depends(get_user_store),
):
    try:
        submission = validate_submission(payload)
    except OnboardingValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"errors": exc.errors},
        )

    try:
        profile = complete_onboarding(store, user_id, submission)
    except OnboardingActionError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return OnboardingResponse(
        message="Profile completed successfully!",
        redirect_url=request.app.state.settings.post_onboarding_redirect,
        profile=profile,
    )
