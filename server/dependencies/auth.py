import secrets

from fastapi import Header, HTTPException, Request


async def verify_admin_password(request: Request, x_admin_password: str = Header(default="")) -> None:
    """Verify the X-Admin-Password header against the configured shared secret.

    Admin endpoints stay locked while APP_ADMIN_PASSWORD is unset.

    Args:
        request (Request): The FastAPI request object (provides app.state).
        x_admin_password (str): The value of the X-Admin-Password header.

    Raises:
        HTTPException: 401 if the password is missing or does not match.
    """
    helper_config = request.app.state.helper_config
    expected = helper_config.get_string_val("APP_ADMIN_PASSWORD", default="")
    if not expected:
        request.app.state.logging.warning("APP_ADMIN_PASSWORD is not set; rejecting admin request.")
        raise HTTPException(status_code=401, detail="Неверный пароль")
    if not x_admin_password or not secrets.compare_digest(x_admin_password.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Неверный пароль")
