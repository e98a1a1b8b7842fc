"""Rate limiter instance for SlowAPI.

Shared so main (app.state.limiter) and the auth routes use the same instance.
Disabled entirely when RATE_LIMIT_ENABLED is false (tests, local runs).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from portal_api.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Applied to login, register and refresh.
limit_auth = limiter.limit(settings.AUTH_RATE_LIMIT)
