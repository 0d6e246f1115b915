class DataUrlError(Exception):
    """Base class for all errors raised by get_data_url"""


class TransportError(DataUrlError):
    """Any failure coming out of the HTTP client, passed through unclassified"""

    def __init__(self, cause: Exception):
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause


class InvalidDataUrl(DataUrlError, ValueError):
    pass
