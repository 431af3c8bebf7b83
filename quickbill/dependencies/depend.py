from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from quickbill.core.config import settings
from quickbill.core.metrics import AUTH_TOKEN_VALIDATION_TOTAL, PERMISSION_CHECK_TOTAL
from quickbill.schemas.auth import CurrentUser

SERVICE_NAME = settings.SERVICE_NAME

bearer_scheme = HTTPBearer()


def _token_result(result: str) -> None:
    AUTH_TOKEN_VALIDATION_TOTAL.labels(service=SERVICE_NAME, result=result).inc()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def authentication_get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Resolve the signed-in restaurant owner from the bearer token.

    Tokens are issued by the external auth provider; only the signature and
    expiry are checked here. Every query downstream is scoped by the returned id.
    """
    _token_result("attempt")
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        _token_result("expired")
        raise _unauthorized("Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning("Rejected invalid access token: {error}", error=str(e))
        _token_result("invalid")
        raise _unauthorized("Invalid token")

    # the auth provider puts the user id in "id", or in "sub" when it has no custom claims
    raw_id = payload.get("id") or payload.get("sub")
    try:
        user_id = UUID(str(raw_id))
    except ValueError:
        logger.warning("Access token carries no usable user id")
        _token_result("no_user_id")
        raise _unauthorized("Invalid token")

    logger.debug("Access token accepted for user_id='{user_id}'", user_id=str(user_id))
    _token_result("success")
    return CurrentUser(
        id=user_id,
        name=payload.get("name") or payload.get("email"),
        permissions=payload.get("permissions") or [],
    )


def permission_required(required_permission: str):
    def _checker(user: CurrentUser = Depends(authentication_get_current_user)):
        granted = user.can(required_permission)
        PERMISSION_CHECK_TOTAL.labels(
            service=SERVICE_NAME,
            permission=required_permission,
            result="granted" if granted else "denied",
        ).inc()
        if not granted:
            logger.warning(
                "Permission '{permission}' denied for user_id='{user_id}'",
                permission=required_permission,
                user_id=str(user.id),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission '{required_permission}' required",
            )
        return True

    return _checker
