from slowapi import Limiter
from slowapi.util import get_remote_address


def get_rate_limit_key(request):
    """Per-user rate limit when the gateway forwarded a user id; else per IP."""
    user_id = (request.headers.get("X-User-Id") or "").strip()
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=get_rate_limit_key)
