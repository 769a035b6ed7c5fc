"""Oracle error types."""


class OracleUnavailable(Exception):
    """
    The oracle could not produce a usable answer.

    Raised for transport failures, timeouts, non-2xx responses and
    payloads outside the closed verdict vocabulary.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
