"""traffic2postman - turn captured HTTP traffic into Postman collections.

This package provides:
- cURL command line parsing
- Burp Suite XML export decoding and raw HTTP request parsing
- A normalized request model shared by every parser
- Postman collection v2.1.0 assembly and serialization

Example:
    >>> from traffic2postman import convert_burp_directory, write_collection
    >>> result = convert_burp_directory("burp_exports/")
    >>> for warning in result.warnings:
    ...     print(warning)
    >>> write_collection(result.collection, "postman_out.json")
"""

from traffic2postman.collection import (
    CollectionAssembler,
    CollectionInfo,
    InputMode,
    collection_from_dict,
    write_collection,
)
from traffic2postman.config import Traffic2PostmanSettings, get_settings
from traffic2postman.convert import (
    ConversionResult,
    convert_burp_directory,
    convert_curl_file,
    convert_inputs,
)
from traffic2postman.discovery import InputKind, InputSource, discover_inputs
from traffic2postman.exceptions import (
    MalformedInputError,
    Traffic2PostmanError,
    UnsupportedFormatError,
    XmlDecodeError,
)
from traffic2postman.models import NormalizedRequest, ParseResult, ParseWarning

__version__ = "0.3.0"

__all__ = [
    # Version
    "__version__",
    # Conversion
    "ConversionResult",
    "convert_burp_directory",
    "convert_curl_file",
    "convert_inputs",
    # Discovery
    "InputKind",
    "InputSource",
    "discover_inputs",
    # Collection
    "CollectionAssembler",
    "CollectionInfo",
    "InputMode",
    "collection_from_dict",
    "write_collection",
    # Model
    "NormalizedRequest",
    "ParseResult",
    "ParseWarning",
    # Configuration
    "Traffic2PostmanSettings",
    "get_settings",
    # Exceptions
    "Traffic2PostmanError",
    "MalformedInputError",
    "UnsupportedFormatError",
    "XmlDecodeError",
]
