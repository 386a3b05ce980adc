"""
Authentication router for login, signup, activation and password resets.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.config import get_settings
from app.core.errors import (
    AccountLockedError,
    AuthError,
    InvalidResetKeyError,
    LDAPServerDownError,
)
from app.dependencies.auth import (
    CurrentUser,
    get_auth_service,
    require_username_available,
)
from app.schemas.auth import (
    ActivationResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    ResetKeyRequest,
    ResetKeyRequestResponse,
    ResetKeyStatusResponse,
    ResetPasswordRequest,
    UserInfoResponse,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def get_domain(request: Request) -> str:
    """Scheme and host the app is being served on."""
    return f"{request.url.scheme}://{request.url.netloc}"


def login_error_status(error: AuthError) -> int:
    if isinstance(error, LDAPServerDownError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(error, AccountLockedError):
        return status.HTTP_423_LOCKED
    return status.HTTP_401_UNAUTHORIZED


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login and start a session",
)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with username and password.

    Uses the LDAP directory or the local credential store depending on
    configuration. On success the session cookie is updated and a
    `last_user` cookie remembers the username for this browser.
    """
    try:
        user = await auth_service.authenticate(body.username, body.password)
    except AuthError as e:
        raise HTTPException(status_code=login_error_status(e), detail=str(e))

    request.session.pop("error", None)
    request.session["user"] = user.username
    request.session["user_id"] = user.id
    request.session["is_admin"] = user.is_admin

    settings = get_settings()
    response.set_cookie(
        settings.last_user_cookie,
        user.username,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
    )

    return LoginResponse(
        user_id=user.id,
        username=user.username,
        is_admin=user.is_admin,
    )


@router.post(
    "/logout",
    summary="End the current session",
)
async def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@router.post(
    "/signup",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    dependencies=[Depends(require_username_available)],
)
async def signup(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new local account.

    Usernames are case-insensitive and must be unique. The account stays
    inactive until the activation key is used.
    """
    try:
        return await auth_service.register_user(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get(
    "/activate/{activation_key}",
    response_model=ActivationResponse,
    summary="Activate an account",
)
async def activate(
    activation_key: str,
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        count = await auth_service.activate_user(activation_key)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if count:
        return ActivationResponse(activated=True, message="Account activated")
    return ActivationResponse(activated=False, message="Account already active")


@router.get(
    "/me",
    response_model=UserInfoResponse,
    summary="Get current user info",
)
async def get_current_user_info(current_user: CurrentUser):
    """Information about the logged-in user."""
    return {
        "id": current_user.id,
        "username": current_user.username,
        "email": current_user.email,
        "auth_source": current_user.auth_source,
        "is_admin": current_user.is_admin,
        "last_seen": current_user.last_seen,
        "created_at": current_user.created_at,
    }


@router.post(
    "/reset",
    response_model=ResetKeyRequestResponse,
    summary="Request a password reset key",
)
async def request_reset_key(
    request: Request,
    body: ResetKeyRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Mail a reset key to the user if the security question and answer match.
    """
    settings = get_settings()
    try:
        await auth_service.send_reset_key(
            body.username,
            body.security_question,
            body.security_answer,
            domain=get_domain(request),
            ip=get_client_ip(request),
            user_cookie=request.cookies.get(settings.last_user_cookie),
        )
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ResetKeyRequestResponse()


@router.get(
    "/reset/{reset_key}",
    response_model=ResetKeyStatusResponse,
    summary="Check a password reset key",
)
async def check_reset_key(
    reset_key: str,
    auth_service: AuthService = Depends(get_auth_service),
):
    return ResetKeyStatusResponse(status=await auth_service.validate_reset_key(reset_key))


@router.post(
    "/reset/{reset_key}",
    summary="Set a new password with a reset key",
)
async def reset_password(
    reset_key: str,
    body: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    if not body.passwords_match():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Passwords do not match",
        )

    try:
        await auth_service.reset_password(reset_key, body.new_password)
    except InvalidResetKeyError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(e), "status": e.status},
        )
    return {"message": "Password updated"}
