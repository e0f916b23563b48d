from fastapi import Header, HTTPException


def get_current_user_id(x_user_id: str | None = Header(None, alias="X-User-Id")) -> str:
    """
    Caller identity. Authentication happens upstream; the gateway forwards
    the authenticated user id in X-User-Id.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="User not authenticated")
    return x_user_id.strip()
