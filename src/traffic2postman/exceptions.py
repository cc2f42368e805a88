"""Custom exceptions for traffic2postman package."""


class Traffic2PostmanError(Exception):
    """Base exception class for all traffic2postman errors."""


class MalformedInputError(Traffic2PostmanError):
    """Raised when a single request record cannot be parsed.

    Scoped to one item: callers record a warning and move on to the next item.
    """


class MalformedUrlError(MalformedInputError):
    """Raised when a URL has no ``scheme://`` separator."""


class EmptyRequestError(MalformedInputError):
    """Raised when raw HTTP request text contains nothing to parse."""


class InvalidRequestLineError(MalformedInputError):
    """Raised when a request line does not split into method and target.

    Attributes:
        line: The offending request line.
    """

    def __init__(self, line: str) -> None:
        super().__init__(f"invalid request line: {line!r}")
        self.line = line


class Base64DecodeError(MalformedInputError):
    """Raised when base64-flagged request content cannot be decoded."""


class UnsupportedFormatError(Traffic2PostmanError):
    """Raised when an input file does not match any recognized kind."""


class XmlDecodeError(Traffic2PostmanError):
    """Raised when a document is not a decodable Burp XML export."""


class InputReadError(Traffic2PostmanError):
    """Raised when an input file cannot be opened or read."""


class OutputWriteError(Traffic2PostmanError):
    """Raised when the assembled collection cannot be written."""


class CollectionSealedError(Traffic2PostmanError):
    """Raised when a collection is modified after serialization has begun."""
