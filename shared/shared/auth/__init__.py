from shared.auth.dependencies import (
    decode_access_token,
    get_auth_settings,
    get_current_user_optional,
    get_current_user_required,
)

__all__ = [
    "decode_access_token",
    "get_auth_settings",
    "get_current_user_optional",
    "get_current_user_required",
]
