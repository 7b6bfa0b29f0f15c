from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from mentor_portal.core.database import get_db
from mentor_portal.core.config import settings
from mentor_portal.core.exceptions import AuthenticationError, UpstreamError
from mentor_portal.core.security import verify_password, create_session_token
from mentor_portal.core.logging_config import logger, set_user_id, set_staff_id
from mentor_portal.core.rate_limiter import login_rate_limit
from mentor_portal.models import Staff
from mentor_portal.modules.auth import Principal, parse_roles, get_current_principal
from mentor_portal.schemas.staff import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SessionInfo,
    SessionResponse,
    StaffResponse,
)


router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@login_rate_limit()
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Log in with email and password and set the session cookie"""
    client_ip = request.client.host if request.client else "unknown"
    email = credentials.email.strip().lower()

    try:
        result = await db.execute(select(Staff).where(Staff.email == email))
        staff = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.log_error_with_context(e, context="login lookup")
        raise UpstreamError(operation="login") from e

    if not staff or not verify_password(credentials.password, staff.password):
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise AuthenticationError("Invalid credentials")

    principal = Principal(
        user_id=staff.id,
        staff_id=staff.staff_id,
        email=staff.email,
        role=staff.role,
        department=staff.department,
        section=staff.section,
        roles=parse_roles(staff.role),
    )
    token = create_session_token(principal.to_claims())

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )

    set_user_id(principal.user_id)
    set_staff_id(principal.staff_id)
    logger.log_auth_event(
        event="login",
        success=True,
        user_email=email,
        client_ip=client_ip,
        role=staff.role
    )

    return LoginResponse(message="Login successful", user=StaffResponse.model_validate(staff))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie"""
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out successfully")


@router.get("/session", response_model=SessionResponse)
async def get_session(principal: Principal = Depends(get_current_principal)):
    """Return the caller's session"""
    return SessionResponse(
        message="Session retrieved successfully",
        session=SessionInfo(
            user_id=principal.user_id,
            staff_id=principal.staff_id,
            email=principal.email,
            role=principal.role,
            department=principal.department,
            section=principal.section,
        ),
    )
