"""Error kinds raised or returned by the relay."""


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing or empty."""


class AuthenticationFailure(Exception):
    """Raised when a handshake token or event signature does not check out.

    ``detail`` is the fixed plaintext body returned to the caller.
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class MalformedPayload(Exception):
    """A verified body that cannot be turned into a record."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class DownstreamFailure(Exception):
    """Raised when Webflow answers an upsert with a non-2xx status."""

    def __init__(self, status_code: int, body: dict):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Webflow request failed with status {status_code}")
