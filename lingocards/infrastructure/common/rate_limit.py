from slowapi import Limiter
from slowapi.util import get_remote_address

from lingocards.feature_flags import is_rate_limiting_enabled

# Shared by every router; main.py registers it on app.state
limiter = Limiter(key_func=get_remote_address, enabled=is_rate_limiting_enabled())
