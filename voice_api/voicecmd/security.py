import secrets

from fastapi import Header, HTTPException
from .config import settings


def _accepted_keys() -> list[str]:
    # Comma-separated so a device key can be rotated without downtime
    return [k.strip() for k in settings.api_key.split(",") if k.strip()]


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    keys = _accepted_keys()
    if not keys:
        return
    if not x_api_key or not any(secrets.compare_digest(x_api_key.encode(), k.encode()) for k in keys):
        raise HTTPException(status_code=401, detail="Invalid API key")
