class RemoteFailure(Exception):
    """
    Any failure reported by (or while talking to) the remote service:
    non-2xx status, empty or malformed body, transport error.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
