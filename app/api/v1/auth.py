"""Authentication endpoints for registration, login, and token management."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.security import REFRESH_TOKEN_TYPE, create_token_pair, decode_token, password_hasher
from app.crud.user import UserCRUD
from app.dependencies import get_current_user, get_db_client
from app.models.user import UserModel, public_user
from app.schemas.auth_schema import LoginRequest, RefreshTokenRequest, RegisterRequest
from app.schemas.responses import success_response
from app.utils.dates import utcnow
from app.utils.exceptions import AuthenticationError, ConflictError, WindspireException
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """
    Create a new user account.

    Args:
        request: RegisterRequest with name, email and password
        db_client: Database client (Firestore or LocalStore)

    Returns:
        Envelope with the public user and a token pair

    Raises:
        ConflictError: If the email is already registered
    """
    try:
        users = UserCRUD(db_client)
        if users.get_by_email(request.email):
            raise ConflictError("Email already registered", details={"email": request.email})

        user = users.create_user(UserModel(
            name=request.name,
            email=request.email,
            password=password_hasher.hash(request.password),
        ))

        logger.info(f"New user registered: {user['email']} (id: {user['id']})")

        return success_response(
            {"user": public_user(user), **create_token_pair(user["id"], user["role"])},
            "Registration successful",
        )

    except (HTTPException, WindspireException):
        raise
    except Exception as e:
        logger.error(f"Registration error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed",
        )


@router.post("/login")
async def login(
    request: LoginRequest,
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """
    Login with email and password.

    Raises:
        AuthenticationError: On wrong credentials or a deactivated account
    """
    try:
        users = UserCRUD(db_client)
        user = users.get_by_email(request.email)

        if not user or not password_hasher.verify(request.password, user.get("password", "")):
            raise AuthenticationError("Incorrect email or password")

        if not user.get("active", True):
            raise AuthenticationError("User account is deactivated")

        user = users.update(user["id"], {"last_login": utcnow()})

        logger.info(f"User logged in: {user['email']}")

        return success_response(
            {"user": public_user(user), **create_token_pair(user["id"], user["role"])},
            "Login successful",
        )

    except (HTTPException, WindspireException):
        raise
    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed",
        )


@router.post("/refresh")
async def refresh_token(
    request: RefreshTokenRequest,
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Exchange a refresh token for a new token pair."""
    try:
        payload = decode_token(request.refresh_token, token_type=REFRESH_TOKEN_TYPE)
    except ValueError as e:
        raise AuthenticationError("Invalid or expired refresh token") from e

    user = UserCRUD(db_client).get_by_id(payload["sub"])
    if not user or not user.get("active", True):
        raise AuthenticationError("User not found or deactivated")

    return success_response(create_token_pair(user["id"], user["role"]), "Token refreshed")


@router.post("/logout")
async def logout(current_user: dict = Depends(get_current_user)) -> Dict[str, Any]:
    """Logout. Tokens are stateless, so clients simply discard them."""
    logger.info(f"User logged out: {current_user['id']}")
    return success_response(None, "Logged out successfully")
