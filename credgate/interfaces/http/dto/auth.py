from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterRequestDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=256)
    email: str = Field(min_length=1, max_length=320)
    # No strength policy: any non-empty password is accepted.
    password: str = Field(min_length=1)

    @field_validator("name", "email")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class LoginRequestDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class RegisterSuccessDTO(BaseModel):
    ok: bool = True
    user_id: str


class TokenDTO(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class MeDTO(BaseModel):
    email: str
