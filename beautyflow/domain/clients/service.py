"""
Client service - business logic for the client store
"""

import csv
import io
import logging
import uuid
from datetime import date, datetime
from io import StringIO
from typing import Any, Optional

from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from openpyxl import load_workbook

from ...shared.clock import parse_date
from ...shared.numbers import to_number
from ...state import AppState
from .repository import ClientRepository
from .schemas import (
    AnamnesisPatch,
    AnamnesisRecord,
    Appointment,
    Client,
    ClientCreate,
    ClientImportResult,
    ClientUpdate,
    ClientWithStatus,
    deep_merge,
)

logger = logging.getLogger(__name__)

# Spreadsheet column aliases, first match wins
IMPORT_COLUMNS = {
    "name": ("Nome", "name", "Client"),
    "phone": ("Telefone", "phone", "Contact"),
    "email": ("Email", "email"),
    "notes": ("Anamnese", "Notes"),
    "last_visit": ("Ultima Visita", "Last Visit"),
    "last_procedure": ("Ultimo Procedimento", "Last Procedure"),
    "price": ("Preco", "Price"),
    "cost": ("Custo", "Cost"),
}


# ============================================================================
# CLIENT INSIGHTS (shared with the dashboard)
# ============================================================================


def latest_visit(client: Client) -> Optional[date]:
    dates = [d for d in (parse_date(a.date) for a in client.appointments) if d]
    return max(dates) if dates else None


def days_since_last_visit(client: Client, today: date) -> Optional[int]:
    last = latest_visit(client)
    return (today - last).days if last else None


def status_tier(client: Client, today: date) -> str:
    """Novo (never visited), Recente (<= 30 days), Ativo (<= 90 days), Inativo"""
    days = days_since_last_visit(client, today)
    if days is None:
        return "Novo"
    if days <= 30:
        return "Recente"
    if days <= 90:
        return "Ativo"
    return "Inativo"


def birthday_this_year(birth_date: Optional[str], today: date) -> Optional[date]:
    """The client's birthday re-anchored to today's year (Feb 29 becomes Mar 1 off leap years)"""
    born = parse_date(birth_date)
    if not born:
        return None
    try:
        return born.replace(year=today.year)
    except ValueError:
        return date(today.year, 3, 1)


def days_until_birthday(birth_date: Optional[str], today: date) -> Optional[int]:
    anniversary = birthday_this_year(birth_date, today)
    return (anniversary - today).days if anniversary else None


def has_birthday_this_month(client: Client, today: date) -> bool:
    born = parse_date(client.birthDate)
    return bool(born and born.month == today.month)


def _matches_search(client: Client, search: str) -> bool:
    term = search.strip().lower()
    return (
        term in client.name.lower()
        or term in (client.phone or "").lower()
        or term in (client.email or "").lower()
    )


def _matches_status(client: Client, status: str, today: date) -> bool:
    if status == "Ativos":
        return status_tier(client, today) in ("Novo", "Recente", "Ativo")
    if status == "Inativos":
        return status_tier(client, today) == "Inativo"
    if status == "Aniversariantes":
        return has_birthday_this_month(client, today)
    return True


# ============================================================================
# SERVICE
# ============================================================================


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, state: AppState):
        self.state = state
        self.repo = ClientRepository()

    def _load(self) -> list[Client]:
        return self.repo.get_clients(self.state.store, self.state.owner_id)

    def _save(self, clients: list[Client]) -> None:
        self.repo.save_clients(self.state.store, self.state.owner_id, clients)

    def get_clients(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[ClientWithStatus]:
        """Own clients, filtered and sorted by name"""
        today = today or date.today()
        clients = self._load()
        if search:
            clients = [c for c in clients if _matches_search(c, search)]
        if status and status != "Todos":
            clients = [c for c in clients if _matches_status(c, status, today)]
        clients.sort(key=lambda c: c.name.lower())
        return [
            ClientWithStatus(**c.model_dump(), statusTier=status_tier(c, today)) for c in clients
        ]

    def get_client(self, client_id: str) -> Client:
        client = self.repo.find(self._load(), client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        logger.info(f"📥 Creating client for user_id: {self.state.owner_id}")
        clients = self._load()
        fields = data.model_dump(exclude={"anamnesis"})
        client = Client(
            id=f"client-{uuid.uuid4().hex[:12]}",
            anamnesis=data.anamnesis or AnamnesisRecord(),
            appointments=[],
            **fields,
        )
        clients.append(client)
        self._save(clients)
        logger.info(f"✅ Client created: {client.id} ({client.name})")
        return client

    def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        """Replace a client's profile by id. Appointments survive unless the body carries them."""
        clients = self._load()
        for index, current in enumerate(clients):
            if current.id != client_id:
                continue
            fields = data.model_dump(exclude={"anamnesis", "appointments"})
            updated = Client(
                id=client_id,
                anamnesis=data.anamnesis or current.anamnesis,
                appointments=data.appointments if data.appointments is not None else current.appointments,
                **fields,
            )
            clients[index] = updated
            self._save(clients)
            logger.info(f"✅ Client updated: {client_id}")
            return updated
        raise HTTPException(status_code=404, detail="Client not found")

    def delete_client(self, client_id: str) -> dict:
        clients = self._load()
        remaining = [c for c in clients if c.id != client_id]
        if len(remaining) == len(clients):
            raise HTTPException(status_code=404, detail="Client not found")
        self._save(remaining)
        logger.info(f"🗑️ Client deleted: {client_id}")
        return {"message": "Client deleted"}

    def update_anamnesis(self, client_id: str, patch: AnamnesisPatch) -> Client:
        """Apply only the anamnesis fields present in the patch"""
        client = self.get_client(client_id)
        changes = patch.model_dump(exclude_unset=True)
        merged = deep_merge(client.anamnesis.model_dump(), changes)
        updated = client.model_copy(update={"anamnesis": AnamnesisRecord.model_validate(merged)})
        return self.replace_stored(updated)

    def replace_stored(self, client: Client) -> Client:
        """Write back a client the caller already modified (used by appointment mutations)"""
        clients = self._load()
        for index, current in enumerate(clients):
            if current.id == client.id:
                clients[index] = client
                self._save(clients)
                return client
        raise HTTPException(status_code=404, detail="Client not found")

    # ------------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------------

    def export_clients_csv(self, search: Optional[str] = None, status: Optional[str] = None) -> StreamingResponse:
        """Export clients as CSV"""
        clients = self.get_clients(search, status)
        logger.info(f"📊 CSV Export requested by user {self.state.owner_id} ({len(clients)} clients)")

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            [
                "ID",
                "Nome",
                "Telefone",
                "Email",
                "Data de Nascimento",
                "Status",
                "Atendimentos",
                "Ultima Visita",
                "Tags",
            ]
        )
        for client in clients:
            last = latest_visit(client)
            writer.writerow(
                [
                    client.id,
                    client.name,
                    client.phone or "",
                    client.email or "",
                    client.birthDate or "",
                    client.statusTier,
                    len(client.appointments),
                    last.isoformat() if last else "",
                    ", ".join(client.tags),
                ]
            )

        output.seek(0)
        filename = f"clientes_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
        logger.info(f"✅ CSV export successful: {filename}")
        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )

    def import_clients(self, filename: str, content: bytes) -> ClientImportResult:
        """Append clients read from a CSV or XLSX spreadsheet"""
        try:
            rows = read_spreadsheet(filename, content)
        except Exception as e:
            logger.error(f"❌ Could not parse spreadsheet {filename}: {e}")
            raise HTTPException(
                status_code=400,
                detail="Could not parse the file. Please ensure it's a valid Excel or CSV file.",
            )

        imported, skipped = [], 0
        for index, row in enumerate(rows):
            client = client_from_row(row, index)
            if client is None:
                skipped += 1
                continue
            imported.append(client)

        clients = self._load()
        clients.extend(imported)
        self._save(clients)
        logger.info(f"✅ Imported {len(imported)} client(s), skipped {skipped} for user {self.state.owner_id}")
        return ClientImportResult(imported=len(imported), skipped=skipped, clients=imported)


# ============================================================================
# SPREADSHEET PARSING
# ============================================================================


def read_spreadsheet(filename: str, content: bytes) -> list[dict[str, Any]]:
    """Rows of the first sheet as header -> value dicts"""
    if filename.lower().endswith(".csv"):
        text = content.decode("utf-8-sig")
        return list(csv.DictReader(io.StringIO(text)))

    workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    sheet = workbook.worksheets[0]
    rows = sheet.iter_rows(values_only=True)
    header = next(rows, None)
    if not header:
        return []
    keys = [str(h).strip() if h is not None else "" for h in header]
    return [dict(zip(keys, values)) for values in rows]


def _column(row: dict[str, Any], field: str) -> Any:
    for alias in IMPORT_COLUMNS[field]:
        value = row.get(alias)
        if value not in (None, ""):
            return value
    return None


def _cell_text(value: Any) -> str:
    # Spreadsheet apps store phone numbers as floats (11987654321.0)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value or "").strip()


def client_from_row(row: dict[str, Any], index: int) -> Optional[Client]:
    """Build a client from one spreadsheet row, or None when the row has no name"""
    name = str(_column(row, "name") or "").strip()
    if not name:
        return None

    appointments = []
    last_visit = parse_date(_column(row, "last_visit"))
    last_procedure = str(_column(row, "last_procedure") or "").strip()
    if last_visit and last_procedure:
        price = to_number(_column(row, "price"))
        appointments.append(
            Appointment(
                id=f"appt-import-{uuid.uuid4().hex[:8]}-{index}",
                date=last_visit.isoformat(),
                procedureName=last_procedure,
                procedure=last_procedure,
                value=price,
                price=price,
                finalValue=price,
                cost=to_number(_column(row, "cost")),
                status="Pago",
            )
        )

    return Client(
        id=f"client-import-{uuid.uuid4().hex[:8]}-{index}",
        name=name,
        phone=_cell_text(_column(row, "phone")),
        email=str(_column(row, "email") or ""),
        anamnesis=AnamnesisRecord(professionalNotes=str(_column(row, "notes") or "")),
        appointments=appointments,
    )
