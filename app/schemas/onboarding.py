from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from app.onboarding.industries import find_industry

INDUSTRY_REQUIRED = "Industry is required"
INDUSTRY_UNKNOWN = "Select a valid industry"
SUB_INDUSTRY_REQUIRED = "Sub-industry is required"
SUB_INDUSTRY_MISMATCH = "Select a specialization that belongs to the chosen industry"
YEARS_REQUIRED = "Years of experience is required"
YEARS_NOT_NUMBER = "Years of experience must be a number"
YEARS_NEGATIVE = "Years of experience must be 0 or greater"
SKILLS_REQUIRED = "At least one skill is required"
BIO_TOO_SHORT = "Bio must be at least 10 characters"
BIO_MIN_LENGTH = 10


def parse_skills(raw: str) -> list[str]:
    """Split a comma-separated skills field into trimmed, non-empty entries."""
    return [item.strip() for item in raw.split(",") if item.strip()]


class OnboardingSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    industry: str = ""
    sub_industry: str = Field(default="", alias="subIndustry")
    years_experience: float = Field(default=None, alias="yearsExperience")
    skills: str = ""
    bio: str = ""

    @field_validator("industry")
    @classmethod
    def _check_industry(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("industry_required", INDUSTRY_REQUIRED)
        if find_industry(value) is None:
            raise PydanticCustomError("industry_unknown", INDUSTRY_UNKNOWN)
        return value

    @field_validator("sub_industry")
    @classmethod
    def _check_sub_industry(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise PydanticCustomError("sub_industry_required", SUB_INDUSTRY_REQUIRED)
        industry = find_industry(info.data.get("industry") or "")
        if industry is not None and value not in industry.subcategories:
            raise PydanticCustomError("sub_industry_mismatch", SUB_INDUSTRY_MISMATCH)
        return value

    @field_validator("years_experience", mode="before")
    @classmethod
    def _check_years(cls, value: Any) -> float:
        if value is None or value == "":
            raise PydanticCustomError("years_required", YEARS_REQUIRED)
        if isinstance(value, bool):
            raise PydanticCustomError("years_not_number", YEARS_NOT_NUMBER)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise PydanticCustomError("years_not_number", YEARS_NOT_NUMBER) from None
        if math.isnan(number) or math.isinf(number):
            raise PydanticCustomError("years_not_number", YEARS_NOT_NUMBER)
        if number < 0:
            raise PydanticCustomError("years_negative", YEARS_NEGATIVE)
        return number

    @field_validator("skills")
    @classmethod
    def _check_skills(cls, value: str) -> str:
        if not parse_skills(value):
            raise PydanticCustomError("skills_required", SKILLS_REQUIRED)
        return value

    @field_validator("bio")
    @classmethod
    def _check_bio(cls, value: str) -> str:
        if len(value) < BIO_MIN_LENGTH:
            raise PydanticCustomError("bio_too_short", BIO_TOO_SHORT)
        return value

    @property
    def skills_list(self) -> list[str]:
        return parse_skills(self.skills)


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a validation error into one message per submission field."""
    alias_to_name = {
        field.alias: name
        for name, field in OnboardingSubmission.model_fields.items()
        if field.alias
    }
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        key = str(loc[0])
        key = alias_to_name.get(key, key)
        errors.setdefault(key, error.get("msg") or "Invalid value")
    return errors


class UserProfile(BaseModel):
    user_id: str
    onboarded: bool
    industry: str | None = None
    sub_industry: str | None = None
    years_experience: float | None = None
    skills: list[str] = Field(default_factory=list)
    bio: str | None = None
    updated_at: str | None = None


class IndustryOption(BaseModel):
    name: str
    subcategories: list[str]


class OnboardingForm(BaseModel):
    industries: list[IndustryOption]
    rules: dict[str, str]


class OnboardingResponse(BaseModel):
    status: str = "ok"
    message: str
    redirect_url: str
    profile: UserProfile
