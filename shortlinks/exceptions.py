"""Exceptions raised by the shortlinks package.

Classes:
    ShortLinksError:
        Generic base class for shortlinks exceptions.

    ShortIdExhaustedError:
        Raised when every allocation round collided and no free short ID was found.

    BackendError:
        Base class for errors raised by backend adapters.

    ShortIdAlreadyExistsError:
        Raised by a backend when inserting a short ID that is already stored.

Example:
    >>> from shortlinks.exceptions import ShortIdExhaustedError
    >>> raise ShortIdExhaustedError("No free short ID after 3 rounds")
    Traceback (most recent call last):
        ...
    shortlinks.exceptions.ShortIdExhaustedError: No free short ID after 3 rounds
"""


class ShortLinksError(Exception):
    """Generic base class for shortlinks exceptions."""

    pass


class ShortIdExhaustedError(ShortLinksError):
    """Exception raised when no free short ID could be allocated."""

    def __init__(self, rounds: int, length: int):
        self.rounds = rounds
        self.length = length
        super().__init__(
            f"Unable to create a short link after {rounds} round(s), "
            f"potentially ran out of IDs (short ID length is now {length})"
        )


class BackendError(ShortLinksError):
    """Exception raised by a backend adapter."""

    pass


class ShortIdAlreadyExistsError(BackendError):
    """Exception raised when inserting a short ID that already exists in the backend."""

    def __init__(self, short_id: str):
        self.short_id = short_id
        super().__init__(f"Short ID already exists: {short_id!r}")
