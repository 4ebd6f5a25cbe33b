from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...core.dependencies import get_authorizer
from ...core.security import AccessScope, ApiKeyAuthorizer

_bearer_scheme = HTTPBearer(auto_error=False)


def _require_scope(required: AccessScope):
    def dependency(
        credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
        authorizer: ApiKeyAuthorizer = Depends(get_authorizer),
    ) -> AccessScope:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key.")
        scope = authorizer.resolve(credentials.credentials)
        if scope is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown API key.")
        if not scope.allows(required):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="API key is read-only.")
        return scope

    return dependency


require_read_access = _require_scope(AccessScope.READ_ONLY)
require_full_access = _require_scope(AccessScope.FULL)
