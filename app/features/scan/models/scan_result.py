from sqlalchemy import JSON, Column, DateTime, Integer, String

from app.platform.db.base import BaseModel


class ScanResult(BaseModel):
    """
    One persisted scan invocation.

    Inserted once when the scan finishes (or fails at the root page, with
    ``http_status`` 0). Only the email capture fields change afterwards.
    """

    __tablename__ = "scan_results"

    session_id = Column(String, unique=True, nullable=False, index=True)
    website_url = Column(String, nullable=False, index=True)
    client_ip = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=True, index=True)

    http_status = Column(Integer, nullable=False, default=0)
    scan_duration_ms = Column(Integer, nullable=False, default=0)

    # Serialized with camelCase aliases, exactly as returned to clients
    findings = Column(JSON, nullable=False, default=list)
    summary = Column(JSON, nullable=False, default=dict)
    page_results = Column(JSON, nullable=False, default=list)
    pages_scanned = Column(Integer, nullable=False, default=0)
    pdf_results = Column(JSON, nullable=False, default=list)
    vendor_warnings = Column(JSON, nullable=False, default=list)
    overall_score = Column(Integer, nullable=True)

    email = Column(String, nullable=True, index=True)
    email_captured_at = Column(DateTime, nullable=True)
    report_sent_at = Column(DateTime, nullable=True)
