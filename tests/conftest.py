"""
pytest configuration and fixtures.
"""

from typing import Callable, Dict, List, Optional
import logging
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpresource.http import HTTPRequest


RequestFactory = Callable[..., HTTPRequest]


@pytest.fixture
def make_request() -> RequestFactory:
    """Build a request from a method and a request-target ("/a?x=1")."""
    def _make(
        method: str = "GET",
        target: str = "/",
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
    ) -> HTTPRequest:
        return HTTPRequest.from_target(method, target, headers=headers, body=body)
    return _make


@pytest.fixture
def faults() -> List[BaseException]:
    """Recording error observer: pass `faults.append` as on_error."""
    return []


@pytest.fixture
def views_dir(tmp_path: Path) -> Path:
    """
    A views directory for the two-step renderer:

        layout.html                 wraps everything
        product.html                content for Product
        admin/layout.html           wraps admin views
        admin/dashboard.html        content for Admin.Dashboard
        not_found.html              content for NotFound
        http_error.html             content for any other HTTPError
    """
    files = {
        "layout.html": "<main>{{ content }}</main>",
        "product.html": "<h1>{{ name }}</h1>",
        "admin/layout.html": "<admin>{{ content }}</admin>",
        "admin/dashboard.html": "<p>{{ greeting }}</p>",
        "not_found.html": "<p>missing: {{ error.message }}</p>",
        "http_error.html": "<p>{{ error.code }} {{ error.reason }}</p>",
    }
    for name, text in files.items():
        target = tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def quiet_access_log(caplog):
    """Capture access and error logs instead of printing them."""
    caplog.set_level(logging.INFO, logger="httpresource")
    yield
