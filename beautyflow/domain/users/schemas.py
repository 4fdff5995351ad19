"""User domain schemas - accounts, profiles, sessions and editable texts"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

UserType = Literal["Administrador", "Funcionário", "Secretaria", "Profissional Lash", "Cliente"]


class UserProfile(BaseModel):
    """Free-form profile data shown on the profile page"""

    photo: Optional[str] = ""
    fullName: Optional[str] = ""
    displayName: Optional[str] = ""
    gender: Optional[str] = "Prefiro não dizer"
    birthDate: Optional[str] = ""
    cpf: Optional[str] = ""
    rg: Optional[str] = ""
    # Contact
    email: Optional[str] = ""
    altEmail: Optional[str] = ""
    phone: Optional[str] = ""
    fixedPhone: Optional[str] = ""
    whatsapp: Optional[str] = ""
    instagram: Optional[str] = ""
    facebook: Optional[str] = ""
    linkedin: Optional[str] = ""
    tiktok: Optional[str] = ""
    # Address
    cep: Optional[str] = ""
    street: Optional[str] = ""
    number: Optional[str] = ""
    complement: Optional[str] = ""
    neighborhood: Optional[str] = ""
    city: Optional[str] = ""
    state: Optional[str] = ""
    country: Optional[str] = "Brasil"
    # Professional
    role: Optional[str] = ""
    specialty: Optional[str] = ""
    bio: Optional[str] = ""


class Credentials(BaseModel):
    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Username and password are required")
        return v.strip()


class UserCreate(Credentials):
    """Schema for an administrator adding a user"""

    userType: UserType = "Cliente"
    profile: UserProfile = Field(default_factory=UserProfile)


class UserUpdate(BaseModel):
    """Partial user update - password only changes when provided"""

    username: Optional[str] = None
    password: Optional[str] = None
    userType: Optional[UserType] = None
    profile: Optional[UserProfile] = None


class UserResponse(BaseModel):
    id: int
    publicId: str
    username: str
    isBoss: bool
    userType: str
    profile: UserProfile


class SessionResponse(BaseModel):
    token: str
    user: UserResponse


class TextUpdate(BaseModel):
    value: str

    @field_validator("value")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Text cannot be empty")
        return v
