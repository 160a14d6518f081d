from typing import Any

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    prompt: str = Field(min_length=1, max_length=20000)


class GenerateResponse(BaseModel):
    text: str


class GenerateJSONResponse(BaseModel):
    data: Any
