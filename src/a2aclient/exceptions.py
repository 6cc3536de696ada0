class TransportError(RuntimeError):
    """Raised when a blocking call to the remote agent cannot complete.

    Covers connection failures, non-success HTTP statuses and responses that
    cannot be decoded. Protocol-level errors returned inside a well-formed
    JSON-RPC response are not transport errors.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
