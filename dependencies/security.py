from typing import Optional, Annotated
from fastapi import Depends, Header
from sqlalchemy.orm import Session
import hmac

from database.db import get_db
from models.profiles import Profile as ProfileModel
from utils.exceptions import AuthenticationError, AuthorizationError

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError("Missing Authorization header")

    # "Bearer <token>"
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise AuthenticationError("Invalid Authorization header format")

    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Invalid auth scheme")
    return token.strip()


def get_current_profile(authorization: AuthHeader = None, db: Session = Depends(get_db)) -> ProfileModel:
    """Resolve the bearer token to a profile; its id is stamped on everything the caller writes."""
    token = _bearer_token(authorization)
    profile = db.query(ProfileModel).filter(ProfileModel.access_token == token).first()
    # timing-safe comparison of the stored token
    if profile is None or not hmac.compare_digest(profile.access_token or "", token):
        raise AuthenticationError("User profile not found")
    return profile


def require_admin(profile: ProfileModel = Depends(get_current_profile)) -> ProfileModel:
    if profile.role != "admin":
        raise AuthorizationError("Admin access required")
    return profile


def require_teacher(profile: ProfileModel = Depends(get_current_profile)) -> ProfileModel:
    if profile.role != "teacher":
        raise AuthorizationError("Teacher access required")
    return profile
