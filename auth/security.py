from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from fastapi import Depends, HTTPException, status
from config import config
import logging
import secrets

logger = logging.getLogger(__name__)

# Tokens are loaded from VALID_TOKENS (comma separated)
bearer_scheme = HTTPBearer()


def is_valid_token(token: str) -> bool:
    # constant time per candidate, checked against every configured token
    matches = [secrets.compare_digest(token.encode(), valid.encode()) for valid in config.valid_tokens]
    return any(matches)


def get_current_client(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    """Validates the Bearer token for every chart and session endpoint."""
    if credentials.scheme != "Bearer" or not is_valid_token(credentials.credentials):
        logger.warning("rejected request with an invalid bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing Bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials
