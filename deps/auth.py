from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from errors import AuthError
from security import TokenUser, decode_token

# auto_error=False so a missing header surfaces as our 401 body, not FastAPI's 403
bearer = HTTPBearer(auto_error=False)


def require_user(
    creds: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
) -> TokenUser:
    """
    Bearer-token guard for every exam route.
      - no Authorization header (or no token in it) -> 401
      - bad signature / expired token                -> 403
    """
    if creds is None or not creds.credentials:
        raise AuthError("Access token required")
    return decode_token(creds.credentials)


CurrentUser = Annotated[TokenUser, Depends(require_user)]
