"""Client domain schemas - Pydantic models for clients, anamnesis and appointment records"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...shared.clock import format_hhmm, parse_date, parse_hhmm
from ...shared.numbers import to_int, to_number
from ...shared.validators import validate_br_phone, validate_email, validate_hhmm

AppointmentStatus = Literal["Pago", "Pendente", "Atrasado"]
PaymentMethod = Literal[
    "Dinheiro", "Cartão Crédito/Débito", "Pix", "Transferência", "Cortesia", "Fidelidade", ""
]
Difficulty = Literal["Fácil", "Médio", "Difícil", ""]
ImageType = Literal["Antes", "Depois", "Durante"]
Gender = Literal["Feminino", "Masculino", "Não Binário", "Prefiro não dizer", ""]
SkinType = Literal["Oleosa", "Seca", "Mista", "Sensível", "Acneica", "N/A", ""]
ClientStatusFilter = Literal["Todos", "Ativos", "Inativos", "Aniversariantes"]


class Record(BaseModel):
    """Stored JSON record - unknown keys from older app versions are dropped"""

    model_config = ConfigDict(extra="ignore")


# ============================================================================
# APPOINTMENT RECORD
# ============================================================================


class MaterialUsed(Record):
    id: str
    name: str = ""
    quantity: str = "1"
    unit: str = "un"
    cost: float = 0
    lotNumber: Optional[str] = ""
    expirationDate: Optional[str] = ""

    @field_validator("cost", mode="before")
    @classmethod
    def coerce_cost(cls, v):
        return to_number(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v):
        return "" if v is None else str(v)


class ProcedureImage(Record):
    id: str
    url: str  # data URL or storage reference
    type: ImageType
    caption: str = ""


class ProcedureStep(Record):
    id: str
    name: str
    done: bool = False


class Appointment(Record):
    """A complete record of a performed (or scheduled) procedure"""

    id: str

    # Dados gerais
    procedureName: str = ""
    category: str = ""
    date: str
    startTime: str = "09:00"
    endTime: str = "10:00"
    duration: int = 60  # minutes
    professional: str = ""
    generalNotes: str = ""

    # Materiais e técnicas
    materials: list[MaterialUsed] = Field(default_factory=list)
    equipmentUsed: str = ""
    procedureSteps: list[ProcedureStep] = Field(default_factory=list)
    technique: str = ""
    difficulty: Difficulty = ""
    reactionDescription: str = ""
    technicalNotes: str = ""
    tags: list[str] = Field(default_factory=list)

    # Financeiro
    value: float = 0
    discount: float = 0
    finalValue: float = 0
    paymentMethod: PaymentMethod = ""
    status: AppointmentStatus = "Pendente"
    cost: float = 0
    commission: float = 0

    media: list[ProcedureImage] = Field(default_factory=list)

    # Pós-atendimento
    postProcedureInstructions: str = ""
    requiresReturn: bool = False
    returnDate: Optional[str] = None

    consentSigned: bool = False
    imageAuthSigned: bool = False

    clientSatisfaction: int = Field(default=0, ge=0, le=5)
    internalNotes: str = ""

    # Legacy fields kept for older stored data: procedure -> procedureName, price -> value
    procedure: str = ""
    price: float = 0
    time: str = ""

    @field_validator("value", "discount", "finalValue", "cost", "commission", "price", mode="before")
    @classmethod
    def coerce_money(cls, v):
        return to_number(v)

    @field_validator("duration", "clientSatisfaction", mode="before")
    @classmethod
    def coerce_int(cls, v):
        return to_int(v)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError("Date must use the YYYY-MM-DD format")
        return parsed.isoformat()

    @field_validator("startTime", "endTime", mode="before")
    @classmethod
    def normalize_time(cls, v):
        # Older records store "9:00"; normalize to zero-padded HH:MM
        if not v:
            return ""
        minutes = parse_hhmm(str(v))
        if minutes is None:
            raise ValueError("Time must use the HH:MM format")
        return format_hhmm(minutes)


class AppointmentFields(Record):
    """Editable appointment fields (everything but id and owner)"""

    procedureName: str = ""
    category: str = ""
    date: Optional[str] = None
    startTime: str = ""
    duration: int = 60
    professional: str = ""
    generalNotes: str = ""
    materials: list[MaterialUsed] = Field(default_factory=list)
    equipmentUsed: str = ""
    procedureSteps: list[ProcedureStep] = Field(default_factory=list)
    technique: str = ""
    difficulty: Difficulty = ""
    reactionDescription: str = ""
    technicalNotes: str = ""
    tags: list[str] = Field(default_factory=list)
    value: float = 0
    discount: float = 0
    paymentMethod: PaymentMethod = ""
    status: AppointmentStatus = "Pendente"
    cost: float = 0
    commission: float = 0
    media: list[ProcedureImage] = Field(default_factory=list)
    postProcedureInstructions: str = ""
    requiresReturn: bool = False
    returnDate: Optional[str] = None
    consentSigned: bool = False
    imageAuthSigned: bool = False
    clientSatisfaction: int = Field(default=0, ge=0, le=5)
    internalNotes: str = ""

    @field_validator("value", "discount", "cost", "commission", mode="before")
    @classmethod
    def coerce_money(cls, v):
        return to_number(v)

    @field_validator("duration", "clientSatisfaction", mode="before")
    @classmethod
    def coerce_int(cls, v):
        return to_int(v)

    @field_validator("startTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v) or ""

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        if not v:
            return None
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError("Date must use the YYYY-MM-DD format")
        return parsed.isoformat()


class MaterialInput(Record):
    name: str = ""
    quantity: str = "1"
    unit: str = "un"
    cost: float = 0
    lotNumber: Optional[str] = ""
    expirationDate: Optional[str] = ""

    @field_validator("cost", mode="before")
    @classmethod
    def coerce_cost(cls, v):
        return to_number(v)


# ============================================================================
# ANAMNESIS
# ============================================================================


class HealthHistory(Record):
    hypertension: bool = False
    diabetes: bool = False
    hormonalDisorders: bool = False
    epilepsy: bool = False
    heartDisease: bool = False
    autoimmuneDisease: bool = False
    respiratoryProblems: bool = False
    respiratoryAllergies: bool = False
    cancer: bool = False
    pacemaker: bool = False
    skinDisease: bool = False
    keloids: bool = False
    hepatitis: bool = False
    hiv: bool = False
    otherConditions: str = ""


class Medications(Record):
    currentMedications: str = ""
    roaccutane: bool = False
    contraceptive: bool = False


class Allergies(Record):
    alcohol: bool = False
    latex: bool = False
    cosmetics: bool = False
    localAnesthetics: bool = False
    lashGlue: bool = False
    makeup: bool = False
    henna: bool = False
    otherAllergies: str = ""


class LashExtensionsHistory(Record):
    hasDoneBefore: bool = False
    hadReaction: bool = False
    reactionDescription: str = ""
    wearsContacts: bool = False
    usesEyeDrops: bool = False


class BrowDesignHistory(Record):
    usedHenna: bool = False
    allergicReactions: str = ""
    hasScars: bool = False


class SkinCareHistory(Record):
    skinType: SkinType = ""
    usesAcids: bool = False
    hadNeedling: bool = False
    recentProcedures: bool = False


class AestheticHistory(Record):
    lashExtensions: LashExtensionsHistory = Field(default_factory=LashExtensionsHistory)
    browDesign: BrowDesignHistory = Field(default_factory=BrowDesignHistory)
    skinCare: SkinCareHistory = Field(default_factory=SkinCareHistory)


class CareRoutine(Record):
    usesSunscreen: bool = False
    currentProducts: str = ""


class AnamnesisRecord(Record):
    healthHistory: HealthHistory = Field(default_factory=HealthHistory)
    medications: Medications = Field(default_factory=Medications)
    allergies: Allergies = Field(default_factory=Allergies)
    aestheticHistory: AestheticHistory = Field(default_factory=AestheticHistory)
    careRoutine: CareRoutine = Field(default_factory=CareRoutine)
    professionalNotes: str = ""
    imageAuth: bool = False
    declaration: bool = False


class AnamnesisPatch(Record):
    """
    Partial anamnesis update. Only fields present in the request body change,
    at any nesting depth (e.g. {"allergies": {"latex": true}}).
    """

    healthHistory: Optional[HealthHistory] = None
    medications: Optional[Medications] = None
    allergies: Optional[Allergies] = None
    aestheticHistory: Optional[AestheticHistory] = None
    careRoutine: Optional[CareRoutine] = None
    professionalNotes: Optional[str] = None
    imageAuth: Optional[bool] = None
    declaration: Optional[bool] = None


# ============================================================================
# CLIENT
# ============================================================================


class Client(Record):
    id: str
    photo: Optional[str] = None
    name: str
    phone: str = ""
    email: str = ""
    birthDate: Optional[str] = None
    gender: Optional[Gender] = ""
    cpf: Optional[str] = None
    profession: Optional[str] = None
    howTheyMetUs: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    aestheticGoals: Optional[str] = None
    usualProcedures: Optional[str] = None
    careFrequency: Optional[str] = None
    areasOfInterest: list[str] = Field(default_factory=list)
    internalNotes: Optional[str] = None
    anamnesis: AnamnesisRecord = Field(default_factory=AnamnesisRecord)
    appointments: list[Appointment] = Field(default_factory=list)

    @field_validator("phone", mode="before")
    @classmethod
    def coerce_phone(cls, v):
        return "" if v is None else str(v)


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    name: str
    phone: Optional[str] = ""
    email: Optional[str] = ""
    photo: Optional[str] = None
    birthDate: Optional[str] = None
    gender: Optional[Gender] = ""
    cpf: Optional[str] = None
    profession: Optional[str] = None
    howTheyMetUs: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    aestheticGoals: Optional[str] = None
    usualProcedures: Optional[str] = None
    careFrequency: Optional[str] = None
    areasOfInterest: list[str] = Field(default_factory=list)
    internalNotes: Optional[str] = None
    anamnesis: Optional[AnamnesisRecord] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_br_phone(v)
        return v or ""

    @field_validator("email")
    @classmethod
    def validate_client_email(cls, v):
        if v:
            return validate_email(v)
        return v or ""

    @field_validator("birthDate")
    @classmethod
    def validate_birth_date(cls, v):
        if not v:
            return None
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError("Birth date must use the YYYY-MM-DD format")
        return parsed.isoformat()


class ClientUpdate(ClientCreate):
    """Whole-object replace of a client's profile; appointments are kept unless sent"""

    appointments: Optional[list[Appointment]] = None


class ClientWithStatus(Client):
    statusTier: str  # Novo, Recente, Ativo, Inativo


class ClientImportResult(BaseModel):
    imported: int
    skipped: int
    clients: list[Client]


def deep_merge(base: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge `changes` into a copy of `base`"""
    merged = dict(base)
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
