"""
Unit tests for the HTTP error taxonomy.
"""

import pytest

from httpresource.errors import (
    BadRequest,
    ClientError,
    Conflict,
    Family,
    Forbidden,
    Found,
    Gone,
    HTTPError,
    InternalServerError,
    InvalidTemplate,
    LinkError,
    MethodNotAllowed,
    MovedPermanently,
    NotAcceptable,
    NotFound,
    NotModified,
    PermanentRedirect,
    Redirection,
    SeeOther,
    ServerError,
    ServiceUnavailable,
    TemporaryRedirect,
)
from httpresource.http import HTTPStatus


class TestStatusAndFamily:
    """Every error class declares a status and a family."""

    @pytest.mark.parametrize("error_cls, code, family", [
        (MovedPermanently, 301, Family.REDIRECT),
        (Found, 302, Family.REDIRECT),
        (SeeOther, 303, Family.REDIRECT),
        (TemporaryRedirect, 307, Family.REDIRECT),
        (PermanentRedirect, 308, Family.REDIRECT),
        (NotModified, 304, Family.NO_RENDER),
        (BadRequest, 400, Family.RENDER),
        (Forbidden, 403, Family.RENDER),
        (NotFound, 404, Family.RENDER),
        (MethodNotAllowed, 405, Family.RENDER),
        (NotAcceptable, 406, Family.RENDER),
        (Conflict, 409, Family.RENDER),
        (Gone, 410, Family.RENDER),
        (InternalServerError, 500, Family.RENDER),
        (ServiceUnavailable, 503, Family.RENDER),
    ])
    def test_declared(self, error_cls, code, family):
        """Test status code and family of each class."""
        assert error_cls.status == code
        assert error_cls.family is family

    def test_hierarchy(self):
        """Test that errors are grouped under their family base classes."""
        assert issubclass(SeeOther, Redirection)
        assert issubclass(NotFound, ClientError)
        assert issubclass(InternalServerError, ServerError)
        assert issubclass(ClientError, HTTPError)
        assert issubclass(HTTPError, Exception)


class TestHTTPError:
    """Tests for the HTTPError base class."""

    def test_defaults(self):
        """Test that the reason and message default to the status phrase."""
        error = NotFound()
        assert error.code == 404
        assert error.reason == "Not Found"
        assert error.message == "Not Found"
        assert error.headers == {}

    def test_message(self):
        """Test a custom message."""
        error = NotFound("no product called 'a'")
        assert error.message == "no product called 'a'"
        assert error.reason == "Not Found"

    def test_custom_reason(self):
        """Test overriding the reason phrase per instance."""
        error = NotFound(reason="No Such Product")
        assert error.reason == "No Such Product"

    def test_repr(self):
        """Test the debugging representation."""
        assert repr(Gone()) == "Gone(410, 'Gone')"

    def test_can_be_raised(self):
        """Test that errors are ordinary exceptions."""
        with pytest.raises(ClientError):
            raise Conflict("version mismatch")

    def test_application_specific_error(self):
        """Test subclassing a family with a new status."""
        class InvalidOrder(ClientError):
            status = HTTPStatus.UNPROCESSABLE_ENTITY

        error = InvalidOrder()
        assert error.code == 422
        assert error.reason == "Unprocessable Entity"
        assert error.family is Family.RENDER


class TestRedirection:
    """Tests for the redirection family."""

    def test_location_header(self):
        """Test that the location becomes a Location header."""
        error = MovedPermanently("/products")
        assert error.location == "/products"
        assert error.headers == {"Location": "/products"}

    def test_default_message(self):
        """Test the short plain-text body."""
        assert Found("/a").message == "Redirecting to /a"


class TestMethodNotAllowed:
    """Tests for MethodNotAllowed."""

    def test_allow_header(self):
        """Test that allowed verbs are sorted into the Allow header."""
        error = MethodNotAllowed({"PUT", "GET", "HEAD"})
        assert error.allowed == ("GET", "HEAD", "PUT")
        assert error.headers == {"Allow": "GET, HEAD, PUT"}

    def test_no_allowed_verbs(self):
        """Test that no Allow header is produced for an empty set."""
        assert MethodNotAllowed().headers == {}


class TestInternalServerError:
    """Tests for InternalServerError."""

    def test_wraps_cause(self):
        """Test that the cause and its message are kept."""
        cause = KeyError("sku")
        error = InternalServerError(cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause
        assert error.message == str(cause)
        assert error.reason == "Internal Server Error"

    def test_without_cause(self):
        """Test the defaults when nothing is wrapped."""
        error = InternalServerError()
        assert error.cause is None
        assert error.message == "Internal Server Error"


class TestRoutingErrors:
    """Configuration errors are ValueErrors, not HTTP errors."""

    def test_value_errors(self):
        """Test the base classes of the routing errors."""
        assert issubclass(InvalidTemplate, ValueError)
        assert issubclass(LinkError, ValueError)
        assert not issubclass(LinkError, HTTPError)
