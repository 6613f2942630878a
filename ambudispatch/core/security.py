import os
import secrets
from typing import Optional

from fastapi import Header, HTTPException, status


def configured_api_key() -> str:
    return os.getenv("API_KEY", "").strip()


def require_api_key(x_api_key: Optional[str] = Header(default=None, alias="X-API-Key")) -> None:
    """
    Proteksi endpoint dispatch (matching, drift, vitals).
    API_KEY kosong → auth dimatikan (dev mode / demo lokal).
    """
    expected = configured_api_key()
    if not expected:
        return
    supplied = (x_api_key or "").strip()
    if not supplied or not secrets.compare_digest(supplied, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key")
