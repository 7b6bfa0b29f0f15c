from fastapi import Request

from mentor_portal.core.config import settings
from mentor_portal.core.exceptions import AuthenticationError
from mentor_portal.core.logging_config import set_user_id, set_staff_id
from mentor_portal.core.security import decode_session_token
from mentor_portal.modules.auth.principal import Principal


async def get_current_principal(request: Request) -> Principal:
    """Resolve the session cookie into a Principal (401 when missing or invalid)"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise AuthenticationError()

    principal = Principal.from_claims(decode_session_token(token))

    # Set user context for downstream logging
    set_user_id(principal.user_id)
    set_staff_id(principal.staff_id)

    return principal
