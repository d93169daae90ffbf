# vocab_backend/app/core/errors.py


class VocabError(Exception):
    """Base error for the vocabulary service."""

    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreUnavailableError(VocabError):
    """The word store could not be reached or rejected the operation."""

    retryable = True


class InvalidWordError(VocabError):
    """The requested word cannot be turned into a record key."""

    status_code = 404
