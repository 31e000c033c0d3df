from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ContactSubmission(BaseModel):
    """Raw contact-form payload.

    Everything is optional here: missing fields are reported by the validator
    and the terms/CAPTCHA guards, not by schema parsing. The Spanish field
    names used by the original form are accepted as aliases.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "nombre"))
    email: Optional[str] = Field(default=None, validation_alias=AliasChoices("email", "correo"))
    phone: Optional[str] = Field(default=None, validation_alias=AliasChoices("phone", "telefono"))
    message: Optional[str] = Field(default=None, validation_alias=AliasChoices("message", "mensaje"))
    captcha_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("captcha_token", "captchaToken", "captcha"),
    )
    terms_accepted: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("terms_accepted", "termsAccepted", "acepta_terminos"),
    )


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    message: str
    terms_accepted: bool
    created_at: datetime


class ContactCreated(BaseModel):
    message: str
    id: int


class ContactList(BaseModel):
    contactos: list[ContactOut]
    total: int
