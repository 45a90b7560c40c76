"""HTTP client session setup."""
import aiohttp

# Requests run until the server finishes or the connection fails.
NO_TIMEOUT = aiohttp.ClientTimeout(total=None)


def create_session() -> aiohttp.ClientSession:
    """Create a client session without aiohttp's default total timeout."""
    return aiohttp.ClientSession(timeout=NO_TIMEOUT)
