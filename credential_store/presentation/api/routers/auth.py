from fastapi import APIRouter, Depends

from ....application.services.credential_service import CredentialService
from ....core.dependencies import get_credential_service
from ....domain.errors import CredentialStoreError
from ...api.dependencies import require_read_access
from ...api.errors import to_http_exception
from ...api.schemas.auth import VerifyCredentialsRequest, VerifyCredentialsResponse

router = APIRouter(prefix="/api/auth", tags=["Credential Verification"])


@router.post("/verify", response_model=VerifyCredentialsResponse, dependencies=[Depends(require_read_access)])
def verify_credentials(
    payload: VerifyCredentialsRequest,
    credentials: CredentialService = Depends(get_credential_service),
) -> VerifyCredentialsResponse:
    try:
        user_id = credentials.verify_credentials(payload.handle, payload.secret)
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return VerifyCredentialsResponse(user_id=user_id)
