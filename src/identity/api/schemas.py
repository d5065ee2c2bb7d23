"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class SignupRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"email": "jane.doe@example.com", "password": "secret123", "confirm_password": "secret123"}
            ]
        }
    }

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)


class LoginRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "jane.doe@example.com", "password": "secret123"}]}}

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class ResetRequest(BaseModel):
    email: str = Field(..., max_length=254)


class NewPasswordRequest(BaseModel):
    user_id: str
    token: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., max_length=128)


# --- Response Schemas ---


class UserResponse(BaseModel):
    user_id: str
    email: str


class ResetTokenResponse(BaseModel):
    user_id: str
    token: str


class StatusResponse(BaseModel):
    status: str = "ok"
