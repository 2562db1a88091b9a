"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes a resource router actually produces, with their reason
phrases attached to the enum members themselves.

=============================================================================
WHERE EACH FAMILY COMES FROM
=============================================================================

    ┌────────┬──────────────────────────────────────────────────────────┐
    │  2xx   │ The verb handler returned normally                       │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  3xx   │ A redirect raised by a handler, the trailing-slash       │
    │        │ policy (301), or a conditional GET that hit (304)        │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  4xx   │ No resource matched (404), the verb is not implemented   │
    │        │ (405), or a handler rejected the request                 │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  5xx   │ A handler raised something that is not an HTTP error     │
    └────────┴──────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    def __new__(cls, code: int, phrase: str):
        member = int.__new__(cls, code)
        member._value_ = code
        member._phrase = phrase
        return member

    # 2xx SUCCESS
    OK = 200, "OK"
    CREATED = 201, "Created"
    ACCEPTED = 202, "Accepted"
    NO_CONTENT = 204, "No Content"

    # 3xx REDIRECTION
    MOVED_PERMANENTLY = 301, "Moved Permanently"
    FOUND = 302, "Found"
    SEE_OTHER = 303, "See Other"
    NOT_MODIFIED = 304, "Not Modified"
    TEMPORARY_REDIRECT = 307, "Temporary Redirect"
    PERMANENT_REDIRECT = 308, "Permanent Redirect"

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400, "Bad Request"
    UNAUTHORIZED = 401, "Unauthorized"
    FORBIDDEN = 403, "Forbidden"
    NOT_FOUND = 404, "Not Found"
    METHOD_NOT_ALLOWED = 405, "Method Not Allowed"
    NOT_ACCEPTABLE = 406, "Not Acceptable"
    CONFLICT = 409, "Conflict"
    GONE = 410, "Gone"
    PRECONDITION_FAILED = 412, "Precondition Failed"
    UNSUPPORTED_MEDIA_TYPE = 415, "Unsupported Media Type"
    UNPROCESSABLE_ENTITY = 422, "Unprocessable Entity"

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500, "Internal Server Error"
    NOT_IMPLEMENTED = 501, "Not Implemented"
    SERVICE_UNAVAILABLE = 503, "Service Unavailable"

    @property
    def phrase(self) -> str:
        """
        The reason phrase written after the code in the status line:

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return self._phrase

    @property
    def is_server_error(self) -> bool:
        """True for 5xx; the access log reports these at ERROR."""
        return 500 <= self < 600
