from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from app.onboarding.industries import INDUSTRIES
from app.schemas.onboarding import (
    BIO_TOO_SHORT,
    INDUSTRY_REQUIRED,
    SKILLS_REQUIRED,
    SUB_INDUSTRY_REQUIRED,
    YEARS_NEGATIVE,
    IndustryOption,
    OnboardingForm,
    OnboardingSubmission,
    UserProfile,
    field_errors,
)
from app.users.store import UserStore

logger = logging.getLogger(__name__)

SUBMISSION_NOT_OBJECT = "Submission must be a JSON object"


class OnboardingValidationError(ValueError):
    def __init__(self, errors: dict[str, str]):
        super().__init__("Onboarding submission is invalid.")
        self.errors = errors


class OnboardingActionError(RuntimeError):
    pass


def onboarding_form() -> OnboardingForm:
    return OnboardingForm(
        industries=[
            IndustryOption(name=industry.name, subcategories=list(industry.subcategories))
            for industry in INDUSTRIES
        ],
        rules={
            "industry": INDUSTRY_REQUIRED,
            "sub_industry": SUB_INDUSTRY_REQUIRED,
            "years_experience": YEARS_NEGATIVE,
            "skills": SKILLS_REQUIRED,
            "bio": BIO_TOO_SHORT,
        },
    )


def validate_submission(payload: Any) -> OnboardingSubmission:
    if not isinstance(payload, dict):
        raise OnboardingValidationError({"__root__": SUBMISSION_NOT_OBJECT})
    try:
        return OnboardingSubmission.model_validate(payload)
    except ValidationError as exc:
        raise OnboardingValidationError(field_errors(exc)) from exc


def complete_onboarding(store: UserStore, user_id: str, submission: OnboardingSubmission) -> UserProfile:
    try:
        profile = store.complete_onboarding(user_id, submission)
    except Exception as exc:  # noqa: BLE001 - caller shows a retryable message
        logger.exception("onboarding_complete_failed user_id=%s: %s", user_id, exc)
        raise OnboardingActionError("Failed to complete onboarding. Please try again.") from exc
    logger.info(
        "onboarding_completed user_id=%s industry=%s sub_industry=%s skills=%s",
        user_id,
        profile.industry,
        profile.sub_industry,
        len(profile.skills),
    )
    return profile
