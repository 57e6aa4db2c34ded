from sqlalchemy import Column, String

from app.platform.db.base import BaseModel


class Waitlist(BaseModel):
    __tablename__ = "waitlist"
    email = Column(String, unique=True, nullable=False, index=True)
    website_url = Column(String, nullable=True)
