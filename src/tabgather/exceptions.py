class TabGatherError(Exception):
    """Base exception for tabgather."""


class FetchError(TabGatherError):
    """Raised when a tab page cannot be downloaded.

    ``status_code`` is the HTTP status of a non-200 response, or 0 when no
    response arrived at all (DNS failure, refused connection, timeout).  In
    that case ``reason`` carries the transport error text.
    """

    def __init__(self, url: str, status_code: int, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code:
            message = f"Tab page {url} returned HTTP {status_code}"
        else:
            message = f"Could not reach {url}" + (f": {reason}" if reason else "")
        super().__init__(message)


class ConfigError(TabGatherError):
    """Raised when a site-table override file cannot be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid site config {path}: {reason}")
