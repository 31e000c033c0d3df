from __future__ import annotations

from app.models.contact import Contact

__all__ = ["Contact"]
