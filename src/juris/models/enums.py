"""Shared enums for models."""

from enum import Enum


class PlanType(str, Enum):
    """Commercial plan tier of a tenant."""

    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class AccountType(str, Enum):
    """Account tier of a regular (non-administrative) user."""

    SIMPLES = "SIMPLES"
    COMPOSTA = "COMPOSTA"
    GERENCIAL = "GERENCIAL"


class CastKind(str, Enum):
    """SQL cast applied to a bound value when writing tenant records."""

    NONE = "none"
    JSONB = "jsonb"
    DATE = "date"
    UUID = "uuid"
