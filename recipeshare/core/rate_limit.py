from slowapi import Limiter
from slowapi.util import get_remote_address

from recipeshare.core.config import settings

# Keyed on the client IP address. Turned off in tests via RATE_LIMIT_ENABLED=false
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
