"""
First-start data: the BOSS account, sample staff users and sample clients
for the BOSS. Runs only when the users table is empty.
"""

import calendar
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from . import config
from .auth import hash_password
from .domain.clients.repository import ClientRepository
from .domain.clients.schemas import AnamnesisRecord, Appointment, Client
from .domain.users.repository import UserRepository
from .domain.users.schemas import UserProfile
from .storage import SqlCollectionStore

logger = logging.getLogger(__name__)

STAFF = [
    ("ana_lima", "Funcionário", {"fullName": "Ana Lima", "role": "Esteticista", "specialty": "Limpeza de Pele"}),
    ("camila_rocha", "Profissional Lash", {"fullName": "Camila Rocha", "role": "Lash Designer", "specialty": "Volume Russo"}),
    ("patricia_oliveira", "Cliente", {"fullName": "Patricia Oliveira"}),
]


def months_ago(today: date, months: int) -> str:
    """Same day `months` calendar months back, clamped to the month's length"""
    month_index = today.year * 12 + today.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day).isoformat()


def _paid(appt_id: str, day: str, name: str, value: float, cost: float, status: str = "Pago") -> Appointment:
    return Appointment(
        id=appt_id,
        date=day,
        procedureName=name,
        procedure=name,
        value=value,
        price=value,
        finalValue=value,
        cost=cost,
        status=status,
    )


def sample_clients(today: date) -> list[Client]:
    one, two, three = (months_ago(today, n) for n in (1, 2, 3))
    lara_anamnesis = AnamnesisRecord()
    lara_anamnesis.healthHistory.hypertension = True
    sofia_anamnesis = AnamnesisRecord()
    sofia_anamnesis.allergies.lashGlue = True

    return [
        Client(
            id="client-boss-1",
            name="Lara Campos",
            phone="11987654321",
            email="lara.campos@email.com",
            photo="https://i.pravatar.cc/150?u=lara",
            birthDate="1995-08-15",
            tags=["VIP", "Recorrente"],
            anamnesis=lara_anamnesis,
            appointments=[
                _paid("appt-1", two, "Extensão de Cílios - Volume Russo", 280, 45),
                _paid("appt-2", one, "Manutenção Volume Russo", 150, 20),
            ],
        ),
        Client(
            id="client-boss-2",
            name="Sofia Pereira",
            phone="21912345678",
            email="sofia.pereira@email.com",
            photo="https://i.pravatar.cc/150?u=sofia",
            birthDate="2001-03-22",
            tags=["Alérgica"],
            anamnesis=sofia_anamnesis,
            appointments=[_paid("appt-3", one, "Lash Lifting com Coloração", 150, 20, status="Pendente")],
        ),
        Client(
            id="client-boss-3",
            name="Beatriz Costa",
            phone="31998761234",
            email="beatriz.costa@email.com",
            photo="https://i.pravatar.cc/150?u=beatriz",
            birthDate="1989-11-10",
            tags=["Inativa"],
            appointments=[_paid("appt-4", three, "Design de Sobrancelhas com Henna", 70, 10)],
        ),
        Client(
            id="client-boss-4",
            name="Isabela Martins",
            phone="41988552211",
            email="isabela.martins@email.com",
            photo="https://i.pravatar.cc/150?u=isabela",
            birthDate="1999-07-02",
            tags=["Nova Cliente"],
        ),
    ]


def init_default_data(db: Session, today: Optional[date] = None) -> bool:
    """Create the default accounts and sample data. Returns False when users already exist."""
    repo = UserRepository()
    if repo.count_users(db) > 0:
        return False

    boss = repo.create_user(
        db,
        username=config.BOSS_USERNAME.lower(),
        password_hash=hash_password(config.BOSS_PASSWORD),
        is_boss=True,
        user_type="Administrador",
        profile=UserProfile(
            fullName="Joyci Almeida",
            displayName="Joy",
            email="luxury.joycialmeida@gmail.com",
            phone="42999722942",
            whatsapp="5542999722942",
            instagram="@luxury.joycialmeida",
            birthDate="1993-11-05",
            gender="Feminino",
            role="CEO & Founder",
            specialty="Master Lash Designer",
        ).model_dump(),
    )
    for username, user_type, profile in STAFF:
        repo.create_user(
            db,
            username=username,
            password_hash=hash_password(config.SEED_STAFF_PASSWORD),
            user_type=user_type,
            profile=UserProfile(**profile).model_dump(),
        )
    logger.info("✅ Default users created")

    ClientRepository.save_clients(SqlCollectionStore(db), boss.id, sample_clients(today or date.today()))
    logger.info("✅ Sample clients created for the BOSS user")
    return True
