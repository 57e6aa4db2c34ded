"""
Test configuration and fixtures for the accessibility scanner API.

Every test gets a fresh SQLite schema, an HTTP client bound to the ASGI app
and a scan orchestrator whose outbound traffic goes to an in-memory
``httpx.MockTransport`` site instead of the network.
"""

import os
import tempfile
from typing import Callable, Dict

import httpx
import pytest
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

load_dotenv()

test_db_url = os.getenv("TEST_DATABASE_URL")
if test_db_url:
    if "postgresql://" in test_db_url and "asyncpg" not in test_db_url:
        test_db_url = test_db_url.replace("postgresql://", "postgresql+asyncpg://")
    os.environ["DATABASE_URL"] = test_db_url
else:
    test_db_path = tempfile.mktemp(suffix=".db")
    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"

os.environ.setdefault("AUDIT_PROVIDER", "markup")

from app.features.scan.models.scan_result import ScanResult  # noqa: E402,F401
from app.features.scan.routes.scan import get_scan_orchestrator  # noqa: E402
from app.features.scan.services.audit.markup_auditor import MarkupAuditor  # noqa: E402
from app.features.scan.services.audit.page_fetcher import PageFetcher  # noqa: E402
from app.features.scan.services.orchestration.scan_orchestrator import ScanOrchestrator  # noqa: E402
from app.features.scan.services.pdf.pdf_inspector import PdfInspector  # noqa: E402
from app.features.waitlist.models.waitlist import Waitlist  # noqa: E402,F401
from app.platform.db.base import Base  # noqa: E402
from app.platform.db.session import get_db  # noqa: E402

SITE = "https://sunriseclinic.com"

ROOT_HTML = """
<html lang="en">
<head><title>Sunrise Family Clinic</title></head>
<body>
  <h1>Welcome to Sunrise Family Clinic</h1>
  <img src="/img/logo.png" alt="Sunrise Family Clinic logo">
  <img src="/img/team.jpg">
  <a href="/about">About us</a>
  <a href="/appointments">Book an appointment</a>
  <a href="/patient-forms/">Patient forms</a>
  <a href="/docs/intake.pdf">Intake packet</a>
  <a href="https://facebook.com/sunriseclinic">Facebook</a>
  <script src="https://offices.zocdoc.com/widget.js"></script>
</body>
</html>
"""

SUBPAGE_HTML = """
<html lang="en">
<head><title>{title}</title></head>
<body><h1>{title}</h1><form><input type="text" name="full_name"></form></body>
</html>
"""

UNTAGGED_PDF = b"%PDF-1.7\n1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class CountingAuditor(MarkupAuditor):
    """Markup auditor that records every URL it audits and can burn fake time."""

    def __init__(self, clock: FakeClock = None, seconds_per_audit: float = 0.0):
        self.calls = []
        self.clock = clock
        self.seconds_per_audit = seconds_per_audit

    async def audit(self, url, page=None):
        self.calls.append(url)
        if self.clock is not None:
            self.clock.advance(self.seconds_per_audit)
        return await super().audit(url, page)


def site_routes() -> Dict[str, Callable[[], httpx.Response]]:
    """Path to response factory; a fresh response per request."""
    return {
        "/": lambda: httpx.Response(200, html=ROOT_HTML),
        "/appointments": lambda: httpx.Response(200, html=SUBPAGE_HTML.format(title="Appointments")),
        "/patient-forms/": lambda: httpx.Response(200, html=SUBPAGE_HTML.format(title="Patient Forms")),
        "/about": lambda: httpx.Response(200, html=SUBPAGE_HTML.format(title="About")),
        "/docs/intake.pdf": lambda: httpx.Response(206, content=UNTAGGED_PDF),
    }


def mock_site(routes: Dict[str, Callable[[], httpx.Response]] = None) -> httpx.MockTransport:
    routes = site_routes() if routes is None else routes
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        factory = routes.get(request.url.path)
        if factory is None:
            return httpx.Response(404, text="Not found")
        return factory()

    transport = httpx.MockTransport(handler)
    transport.requested = requested
    return transport


def build_orchestrator(
    transport: httpx.MockTransport,
    auditor: MarkupAuditor = None,
    clock: Callable[[], float] = None,
    **kwargs,
) -> ScanOrchestrator:
    auditor = auditor or CountingAuditor()
    return ScanOrchestrator(
        fetcher=PageFetcher(transport=transport),
        auditor=auditor,
        markup_auditor=auditor,
        pdf_inspector=PdfInspector(transport=transport),
        clock=clock or FakeClock(),
        **kwargs,
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def site_transport():
    return mock_site()


@pytest.fixture
def auditor():
    return CountingAuditor()


@pytest.fixture
def orchestrator_factory(site_transport, auditor, fake_clock):
    """The route dependency builds a fresh orchestrator per request, like production."""
    return lambda: build_orchestrator(site_transport, auditor=auditor, clock=fake_clock)


@pytest.fixture
async def db_engine():
    engine = create_async_engine(os.environ["DATABASE_URL"], poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture
async def client(test_app, session_factory, orchestrator_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_scan_orchestrator] = orchestrator_factory

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=test_app),
        base_url="http://testserver",
    ) as ac:
        yield ac

    test_app.dependency_overrides.clear()
