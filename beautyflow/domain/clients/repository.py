"""Client repository - whole-collection reads and writes of client records"""

from typing import Any, Optional

from ...storage import CLIENTS
from .schemas import AnamnesisRecord, Client


def _hydrate_appointment(raw: dict[str, Any]) -> dict[str, Any]:
    """Map the pre-record appointment shape (procedure/price/time) to the current one"""
    if raw.get("procedureName"):
        return raw
    legacy_time = raw.get("startTime") or raw.get("time") or "09:00"
    hydrated = dict(raw)
    hydrated.update(
        {
            "procedureName": raw.get("procedure") or "",
            "procedure": raw.get("procedure") or "",
            "value": raw.get("value", raw.get("price", 0)),
            "price": raw.get("price", 0),
            "cost": raw.get("cost", 0),
            "duration": raw.get("duration", 60),
            "status": raw.get("status") or "Pendente",
            "time": legacy_time,
            "startTime": legacy_time,
        }
    )
    return hydrated


def hydrate_client(raw: dict[str, Any]) -> Client:
    """Upgrade a stored client dict (possibly from an older app version) into a Client"""
    data = dict(raw)
    anamnesis = data.get("anamnesis")
    if isinstance(anamnesis, str) or not isinstance(anamnesis, dict) or "healthHistory" not in anamnesis:
        notes = anamnesis if isinstance(anamnesis, str) else ""
        data["anamnesis"] = AnamnesisRecord(professionalNotes=notes).model_dump()
    data["appointments"] = [_hydrate_appointment(a) for a in data.get("appointments") or []]
    return Client.model_validate(data)


class ClientRepository:
    """Repository for client collections"""

    @staticmethod
    def get_clients(store, owner_id: int) -> list[Client]:
        """Get all clients for an owner (empty list when nothing was ever saved)"""
        raw = store.load(owner_id, CLIENTS) or []
        return [hydrate_client(c) for c in raw]

    @staticmethod
    def save_clients(store, owner_id: int, clients: list[Client]) -> None:
        """Replace the owner's whole client collection"""
        store.save(owner_id, CLIENTS, [c.model_dump(mode="json") for c in clients])

    @staticmethod
    def find(clients: list[Client], client_id: str) -> Optional[Client]:
        return next((c for c in clients if c.id == client_id), None)

    @staticmethod
    def get_visible_clients(store, owner_ids: list[int]) -> list[tuple[int, Client]]:
        """(owner_id, client) pairs across several owners, for Boss-wide views"""
        pairs = []
        for owner_id in owner_ids:
            for client in ClientRepository.get_clients(store, owner_id):
                pairs.append((owner_id, client))
        return pairs
