from fastapi import APIRouter, Depends

from textscan.api.deps import get_api_key
from textscan.core.config import Settings, get_settings
from textscan.schemas.analyze import CredentialValidationResponse
from textscan.services.credentials import validate_credential

router = APIRouter()


@router.post("/credentials/validate", response_model=CredentialValidationResponse)
async def validate_api_key(
    api_key: str = Depends(get_api_key),
    settings: Settings = Depends(get_settings),
) -> CredentialValidationResponse:
    return CredentialValidationResponse(valid=await validate_credential(api_key, settings=settings))
