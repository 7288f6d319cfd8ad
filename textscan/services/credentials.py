from __future__ import annotations

from textscan.core.config import Settings, get_settings
from textscan.core.errors import RemoteCallError
from textscan.core.logging import get_logger
from textscan.services.openai_client import OpenAIClient, client_scope
from textscan.utils.text import is_header_safe

logger = get_logger(__name__)


async def validate_credential(
    api_key: str | None,
    *,
    settings: Settings | None = None,
    client: OpenAIClient | None = None,
) -> bool:
    """Return True when the key has the expected prefix and can list models.

    Never raises for a bad key; the cause is logged instead.
    """
    settings = settings or get_settings()
    key = (api_key or "").strip()
    if not key.startswith(settings.credential_prefix):
        logger.info("credential_rejected", reason="prefix", expected_prefix=settings.credential_prefix)
        return False
    if not is_header_safe(key):
        logger.info("credential_rejected", reason="charset")
        return False

    try:
        async with client_scope(key, settings=settings, client=client) as active:
            payload = await active.list_models()
    except RemoteCallError as exc:
        logger.warning("credential_validation_failed", error=str(exc), status_code=exc.status_code)
        return False

    valid = isinstance(payload, dict) and isinstance(payload.get("data"), list)
    if not valid:
        logger.warning("credential_validation_unrecognized_listing", payload_type=type(payload).__name__)
    return valid
