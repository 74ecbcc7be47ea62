"""
Shared slowapi rate limiter.

One instance so every route shares the same counter store. Limit and on/off
switch are read from the settings of the app serving the request, so two apps
built with different settings each enforce their own.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

# Counters are per client address. Keying on the submitted username as well would
# need the JSON body, which is not parsed yet when the limit is checked; spraying
# many usernames from one address is still capped by the address key.
limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")

_KEY_SEPARATOR = "|"


def login_rate_key(request: Request) -> str:
    """Client address, prefixed with the serving app's LOGIN_RATE_LIMIT."""
    limit = request.app.state.settings.LOGIN_RATE_LIMIT
    return f"{limit}{_KEY_SEPARATOR}{get_remote_address(request)}"


def login_rate_limit(key: str) -> str:
    """slowapi hands dynamic limit providers the key built by login_rate_key."""
    return key.split(_KEY_SEPARATOR, 1)[0]


def login_rate_limit_exempt(request: Request) -> bool:
    return not request.app.state.settings.RATE_LIMIT_ENABLED
