"""FastAPI endpoints for the Identity domain: signup, login and password reset."""

from fastapi import APIRouter, Depends, Request

from identity.account.authentication import Authentication
from identity.account.registration import Registration
from identity.account.reset import PasswordReset
from identity.api.dependencies import (
    SESSION_EMAIL,
    SESSION_USER_ID,
    get_authentication,
    get_password_reset,
    get_registration,
)
from identity.api.schemas import (
    LoginRequest,
    NewPasswordRequest,
    ResetRequest,
    ResetTokenResponse,
    SignupRequest,
    StatusResponse,
    UserResponse,
)

router = APIRouter(tags=["auth"])


@router.post("/signup", status_code=201, response_model=UserResponse)
async def signup(body: SignupRequest, registration: Registration = Depends(get_registration)) -> UserResponse:
    user = registration.register(body.email, body.password, body.confirm_password)
    return UserResponse(user_id=str(user.id), email=user.email.address)


@router.post("/login", response_model=UserResponse)
async def login(
    body: LoginRequest,
    request: Request,
    authentication: Authentication = Depends(get_authentication),
) -> UserResponse:
    user = authentication.authenticate(body.email, body.password)
    request.session[SESSION_USER_ID] = user.user_id
    request.session[SESSION_EMAIL] = user.email
    return UserResponse(user_id=user.user_id, email=user.email)


@router.post("/logout", response_model=StatusResponse)
async def logout(request: Request) -> StatusResponse:
    request.session.clear()
    return StatusResponse()


@router.post("/reset", response_model=StatusResponse)
async def request_reset(body: ResetRequest, reset: PasswordReset = Depends(get_password_reset)) -> StatusResponse:
    reset.request_reset(body.email)
    return StatusResponse()


@router.get("/reset/{token}", response_model=ResetTokenResponse)
async def verify_reset_token(token: str, reset: PasswordReset = Depends(get_password_reset)) -> ResetTokenResponse:
    return ResetTokenResponse(user_id=reset.verify_token(token), token=token)


@router.post("/new-password", response_model=StatusResponse)
async def new_password(body: NewPasswordRequest, reset: PasswordReset = Depends(get_password_reset)) -> StatusResponse:
    reset.reset_password(body.user_id, body.token, body.password)
    return StatusResponse()
