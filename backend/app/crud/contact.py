from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, PersistenceError
from app.models.contact import Contact

# Ids live in a signed 64-bit column; larger values overflow the driver.
MAX_CONTACT_ID = 2**63 - 1


class ContactStore:
    """Insert, list and fetch contact records through one request-scoped session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def insert(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        message: str,
        terms_accepted: bool,
    ) -> Contact:
        contact = Contact(
            name=name,
            email=email,
            phone=phone,
            message=message,
            terms_accepted=terms_accepted,
        )
        try:
            self.db.add(contact)
            self.db.commit()
            self.db.refresh(contact)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(details=_describe(e)) from e
        return contact

    def list_all(self) -> list[Contact]:
        stmt = select(Contact).order_by(Contact.created_at.desc(), Contact.id.desc())
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise PersistenceError("Error fetching contacts", details=_describe(e)) from e

    def get_by_id(self, contact_id: int) -> Contact:
        if not 0 < contact_id <= MAX_CONTACT_ID:
            raise NotFoundError()
        try:
            contact = self.db.execute(
                select(Contact).where(Contact.id == contact_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError("Error fetching contact", details=_describe(e)) from e
        if contact is None:
            raise NotFoundError()
        return contact


def _describe(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)
