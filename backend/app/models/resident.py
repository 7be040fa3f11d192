"""
Barangay Portal — Pydantic Models for Residents & Family Heads
Attributes are snake_case (matching the Supabase columns); the JSON API
speaks camelCase through aliases.
"""

from datetime import date, datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.security import sanitize_input, sanitize_phone


# Messages reported when a required field is missing or blank
REQUIRED_FIELD_MESSAGES = {
    "firstName": "First name is required",
    "lastName": "Last name is required",
    "gender": "Gender is required",
    "birthDate": "Valid birth date is required",
    "address": "Address is required",
}


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ResidentWrite(_CamelModel):
    """Body accepted by create (POST) and update (PUT)."""
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    gender: Gender
    birth_date: date = Field(alias="birthDate")
    address: str
    contact_number: str = Field("", alias="contactNumber")
    family_head_id: Optional[str] = Field(None, alias="familyHeadId")

    @field_validator("first_name", "last_name", "address", mode="before")
    @classmethod
    def _required_text(cls, value, info):
        text = sanitize_input(value) if isinstance(value, str) else value
        if not text:
            alias = cls.model_fields[info.field_name].alias or info.field_name
            raise ValueError(REQUIRED_FIELD_MESSAGES[alias])
        return text

    @field_validator("contact_number", mode="before")
    @classmethod
    def _contact_digits(cls, value):
        if value is None:
            return ""
        return sanitize_phone(sanitize_input(value)) if isinstance(value, str) else value

    @field_validator("family_head_id", mode="before")
    @classmethod
    def _blank_head_is_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None


class ResidentCreate(ResidentWrite):
    pass


class ResidentUpdate(ResidentWrite):
    pass


class Resident(_CamelModel):
    """A stored resident. The cached QR artifact never serializes."""
    resident_id: str = Field(alias="residentId")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    gender: Gender
    birth_date: date = Field(alias="birthDate")
    address: str
    contact_number: str = Field("", alias="contactNumber")
    family_head_id: Optional[str] = Field(None, alias="familyHeadId")
    registration_date: datetime = Field(alias="registrationDate")
    qr_code: Optional[str] = Field(None, alias="qrCode", exclude=True)

    @field_validator("family_head_id", mode="before")
    @classmethod
    def _blank_head_is_none(cls, value):
        return value or None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class FamilyHead(_CamelModel):
    """Household reference point. Looked up by head_id, never owned."""
    head_id: str = Field(alias="headId")
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    address: str
    contact_number: str = Field("", alias="contactNumber")


class QRClaim(BaseModel):
    """Public identity claim encoded into the QR artifact.

    `verified` only means the claim was issued by this service; it is not
    a third-party attestation.
    """
    id: str
    name: str
    type: Literal["Resident"] = "Resident"
    verified: bool = True


class QRCodeResponse(_CamelModel):
    qr_code: str = Field(alias="qrCode")


class MessageResponse(BaseModel):
    message: str
