"""Parsers that turn captured traffic into normalized requests.

Example usage:
    from traffic2postman.parsers import parse_burp_file, parse_curl_file

    result = parse_burp_file("repeater-items.xml")
    if result.has_warnings:
        print(f"Warning: {len(result.warnings)} items failed to parse")
    for request in result.requests:
        print(request.method, request.url.raw)
"""

from traffic2postman.parsers.auth import extract_auth
from traffic2postman.parsers.body import classify_body
from traffic2postman.parsers.burp import (
    BurpExport,
    BurpRawItem,
    decode_burp_export,
    parse_burp_file,
    parse_burp_string,
)
from traffic2postman.parsers.curl import parse_curl_command, parse_curl_file, parse_curl_string
from traffic2postman.parsers.raw_http import parse_http_request
from traffic2postman.parsers.url import decompose_url

__all__ = [
    # Shared
    "classify_body",
    "decompose_url",
    "extract_auth",
    # cURL
    "parse_curl_command",
    "parse_curl_file",
    "parse_curl_string",
    # Raw HTTP
    "parse_http_request",
    # Burp
    "BurpExport",
    "BurpRawItem",
    "decode_burp_export",
    "parse_burp_file",
    "parse_burp_string",
]
