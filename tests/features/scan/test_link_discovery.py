from app.features.scan.services.discovery.link_discovery import LinkDiscoveryService

BASE = "https://sunriseclinic.com"


def test_patient_facing_links_come_first():
    html = """
    <a href="/about">About</a>
    <a href="/blog/flu-season">Blog</a>
    <a href="/contact-us">Contact</a>
    <a href="/schedule">Schedule a visit</a>
    """
    links = LinkDiscoveryService.discover_links(html, BASE)

    assert links == [
        "https://sunriseclinic.com/schedule",
        "https://sunriseclinic.com/contact-us",
        "https://sunriseclinic.com/about",
    ]


def test_other_links_keep_discovery_order_and_limit():
    html = "".join(f'<a href="/page-{i}">Page {i}</a>' for i in range(6))
    links = LinkDiscoveryService.discover_links(html, BASE, limit=3)
    assert links == [f"{BASE}/page-0", f"{BASE}/page-1", f"{BASE}/page-2"]


def test_discards_non_navigable_and_cross_origin_targets():
    html = """
    <a href="#main">Skip</a>
    <a href="javascript:void(0)">Menu</a>
    <a href="mailto:frontdesk@sunriseclinic.com">Email</a>
    <a href="tel:+15555550100">Call</a>
    <a href="https://portal.sunriseclinic.com/login">Portal</a>
    <a href="http://sunriseclinic.com/insurance">Insecure</a>
    <a href="https://www.zocdoc.com/practice/sunrise">Book on Zocdoc</a>
    <a href="/forms/intake.pdf">Intake PDF</a>
    """
    assert LinkDiscoveryService.discover_links(html, BASE) == []


def test_dedupes_and_drops_homepage():
    html = """
    <a href="/">Home</a>
    <a href="https://sunriseclinic.com/">Home again</a>
    <a href="/providers/">Providers</a>
    <a href="/providers?sort=name">Providers sorted</a>
    <a href="providers#dr-lee">Dr. Lee</a>
    """
    links = LinkDiscoveryService.discover_links(html, BASE)
    assert links == ["https://sunriseclinic.com/providers/"]


def test_resolves_relative_links():
    links = LinkDiscoveryService.discover_links('<a href="insurance">Insurance</a>', BASE)
    assert links == ["https://sunriseclinic.com/insurance"]


def test_relative_links_resolve_against_page_path():
    html = """
    <a href="contact.html">Contact</a>
    <a href="../patients/forms.html">Forms</a>
    <a href="/index.html">Home</a>
    """
    links = LinkDiscoveryService.discover_links(html, "https://clinic-demo.org/site/index.html")

    assert links == [
        "https://clinic-demo.org/patients/forms.html",
        "https://clinic-demo.org/site/contact.html",
        "https://clinic-demo.org/index.html",
    ]


def test_same_origin_follows_served_host():
    html = '<a href="https://www.sunriseclinic.com/appointments">Book</a>'

    assert LinkDiscoveryService.discover_links(html, "https://www.sunriseclinic.com/") == [
        "https://www.sunriseclinic.com/appointments"
    ]
    assert LinkDiscoveryService.discover_links(html, BASE) == []
