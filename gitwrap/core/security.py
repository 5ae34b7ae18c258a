from fastapi import HTTPException
from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param

INVALID_BEARER_DETAIL = "Authorization header must be a Bearer token"


class OptionalGitHubBearer(HTTPBearer):
    """Bearer scheme where the header is optional but must not be empty.

    Other schemes are ignored so the service falls back to its own token.
    """

    async def __call__(self, request: Request) -> HTTPAuthorizationCredentials | None:
        scheme, credentials = get_authorization_scheme_param(
            request.headers.get("Authorization")
        )
        if scheme.lower() == "bearer" and not credentials.strip():
            raise HTTPException(status_code=401, detail=INVALID_BEARER_DETAIL)
        return await super().__call__(request)


bearer_scheme = OptionalGitHubBearer(auto_error=False)


def extract_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    """Extract an optional caller-supplied GitHub token.

    Without credentials the service falls back to its own token.

    Raises:
        HTTPException: If credentials are present but malformed or empty.
    """

    if credentials is None:
        return None

    if credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        raise HTTPException(status_code=401, detail=INVALID_BEARER_DETAIL)

    return credentials.credentials.strip()
