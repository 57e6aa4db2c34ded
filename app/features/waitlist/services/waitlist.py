from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.features.waitlist.models.waitlist import Waitlist


async def add_to_waitlist(db: AsyncSession, email: str, website_url: Optional[str] = None) -> Waitlist:
    """Insert the email, or refresh the website it was last seen with."""
    result = await db.execute(select(Waitlist).where(Waitlist.email == email))
    entry = result.scalars().first()
    if entry:
        if website_url:
            entry.website_url = website_url
    else:
        entry = Waitlist(email=email, website_url=website_url)
        db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry
