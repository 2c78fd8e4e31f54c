# portfolio/core/auth.py
import logging
import secrets

from fastapi import Depends, Form, Header, Query

from portfolio.core.config import Settings, get_settings
from portfolio.core.errors import Unauthorized

logger = logging.getLogger(__name__)


def require_admin_token(
    x_admin_token: str | None = Header(default=None),
    form_token: str | None = Form(default=None, alias="token"),
    query_token: str | None = Query(default=None, alias="token"),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Enforce the shared-secret admin token.

    The token may arrive as:
      - `X-Admin-Token` header
      - `token` multipart/form field
      - `token` query parameter

    Runs before the route body, so a rejected request never touches the
    filesystem or the catalog.

    Raises:
        Unauthorized(401): if the token is missing or does not match.
    """
    token = x_admin_token or form_token or query_token
    if not token or not secrets.compare_digest(token, settings.ADMIN_TOKEN):
        logger.warning("Rejected admin request: %s", "bad token" if token else "no token")
        raise Unauthorized("Invalid admin token")
