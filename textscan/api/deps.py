from fastapi import Depends, Header, HTTPException, status

from textscan.core.config import Settings, get_settings


def get_api_key(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> str:
    if authorization:
        if not authorization.lower().startswith("bearer "):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Bearer token required")
        return authorization.split(" ", 1)[1].strip()
    if settings.openai_api_key:
        return settings.openai_api_key
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="API key required")
