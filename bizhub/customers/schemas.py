"""
Customer schemas for Vietnamese businesses and individuals.
"""

from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional, List
from enum import Enum
import re


class CustomerTypeEnum(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"
    CONTRACTOR = "contractor"
    DEALER = "dealer"
    GOVERNMENT = "government"
    OTHER = "other"


class AddressModel(BaseModel):
    line1: str = Field(..., min_length=3, max_length=200)
    ward: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    city: str = Field(..., min_length=2, max_length=100)
    country: str = Field(default="Việt Nam")


class CreateCustomerRequest(BaseModel):
    """POST /customers"""

    # Identity
    name: str = Field(..., min_length=2, max_length=200)
    phone: str = Field(..., min_length=9, max_length=15)
    email: Optional[EmailStr] = None
    company_name: Optional[str] = Field(None, max_length=200)

    # Classification
    customer_type: CustomerTypeEnum = Field(default=CustomerTypeEnum.INDIVIDUAL)
    tags: Optional[List[str]] = Field(default=[])

    address: Optional[AddressModel] = None

    # Tax code (mã số thuế): 10 digits, or 10 digits + "-" + 3-digit branch
    tax_code: Optional[str] = Field(None, max_length=14)

    notes: Optional[str] = Field(None, max_length=1000)
    is_active: bool = True

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        cleaned = re.sub(r"[\s\-\.\(\)]", "", v)
        if not cleaned.replace("+", "").isdigit():
            raise ValueError("Invalid phone number")
        return cleaned

    @field_validator("tax_code")
    @classmethod
    def validate_tax_code(cls, v):
        if v and not re.match(r"^[0-9]{10}(-[0-9]{3})?$", v):
            raise ValueError("Invalid tax code format")
        return v
