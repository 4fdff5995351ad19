"""Procedure catalog schemas"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.numbers import to_int, to_number


class Procedure(BaseModel):
    """A service template - only seeds new appointments, never edits existing ones"""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    category: str = "Geral"
    defaultPrice: float = 0
    defaultCost: float = 0
    defaultDuration: int = 60  # minutes
    technicalDescription: str = ""
    defaultPostProcedureInstructions: str = ""
    isActive: bool = True

    @field_validator("defaultPrice", "defaultCost", mode="before")
    @classmethod
    def coerce_money(cls, v):
        return to_number(v)

    @field_validator("defaultDuration", mode="before")
    @classmethod
    def coerce_duration(cls, v):
        return to_int(v)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return v or "Geral"

    @field_validator("technicalDescription", "defaultPostProcedureInstructions", mode="before")
    @classmethod
    def default_text(cls, v):
        return v or ""

    @field_validator("isActive", mode="before")
    @classmethod
    def default_active(cls, v):
        return True if v is None else v


class ProcedureCreate(BaseModel):
    name: str
    category: Optional[str] = "Geral"
    defaultPrice: float = 0
    defaultCost: float = 0
    defaultDuration: int = 60
    technicalDescription: Optional[str] = ""
    defaultPostProcedureInstructions: Optional[str] = ""
    isActive: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Procedure name is required")
        return v.strip()

    @field_validator("defaultPrice", "defaultCost", mode="before")
    @classmethod
    def coerce_money(cls, v):
        return to_number(v)

    @field_validator("defaultDuration", mode="before")
    @classmethod
    def coerce_duration(cls, v):
        return to_int(v)
