# Profile resolution hook.
# Created: 2026-10-19

from __future__ import annotations

from collections.abc import Callable
from typing import Any

ProfileHook = Callable[[str, dict[str, Any]], Any]


async def default_user_profile(access_token: str, extra_params: dict[str, Any]) -> dict[str, Any]:
    """Placeholder profile.

    Provider integrations replace this with a call to their own profile
    endpoint using the access token.
    """
    return {"provider": "oauth2"}
