"""
Appointment value deriver.

Pure helpers that keep an appointment record's dependent fields consistent:
finalValue follows value and discount, endTime follows startTime and
duration, cost follows the materials list. Every helper returns a new
Appointment and never raises on odd numeric input.
"""

import uuid

from ...shared.clock import add_minutes
from ...shared.numbers import round_money, to_number
from ..clients.schemas import Appointment, MaterialInput, MaterialUsed, ProcedureStep
from ..procedures.schemas import Procedure

DEFAULT_STEPS = ("Higienização", "Aplicação", "Finalização")


def materials_cost(materials: list[MaterialUsed]) -> float:
    return round_money(sum(to_number(m.cost) for m in materials))


def derive(appointment: Appointment) -> Appointment:
    """Recompute finalValue, endTime and (when materials exist) cost"""
    updates = {
        "finalValue": round_money(to_number(appointment.value) - to_number(appointment.discount)),
    }
    if appointment.startTime:
        # A zero-length record ends when it starts
        end_time = add_minutes(appointment.startTime, appointment.duration or 0)
        if end_time:
            updates["endTime"] = end_time
    if appointment.materials:
        updates["cost"] = materials_cost(appointment.materials)
    return appointment.model_copy(update=updates)


def seed_from_procedure(appointment: Appointment, procedure: Procedure) -> Appointment:
    """
    Copy a catalog template's defaults into the appointment.

    Meant to run once, when the user picks the procedure. Steps already on
    the record are kept; only an empty step list gets the default three.
    """
    updates = {
        "procedureName": procedure.name,
        "procedure": procedure.name,
        "category": procedure.category,
        "value": procedure.defaultPrice,
        "price": procedure.defaultPrice,
        "cost": procedure.defaultCost,
        "duration": procedure.defaultDuration,
        "postProcedureInstructions": procedure.defaultPostProcedureInstructions,
    }
    if not appointment.procedureSteps:
        updates["procedureSteps"] = [
            ProcedureStep(id=f"step{i}", name=name) for i, name in enumerate(DEFAULT_STEPS, start=1)
        ]
    return derive(appointment.model_copy(update=updates))


def _with_materials(appointment: Appointment, materials: list[MaterialUsed]) -> Appointment:
    # An emptied list means zero cost, which derive() alone would not apply
    return derive(appointment.model_copy(update={"materials": materials, "cost": materials_cost(materials)}))


def add_material(appointment: Appointment, material: MaterialInput) -> Appointment:
    item = MaterialUsed(id=f"mat-{uuid.uuid4().hex[:12]}", **material.model_dump())
    return _with_materials(appointment, [*appointment.materials, item])


def update_material(appointment: Appointment, material_id: str, material: MaterialInput) -> Appointment:
    """Replace one material by id. Unknown ids leave the list unchanged."""
    materials = [
        MaterialUsed(id=m.id, **material.model_dump()) if m.id == material_id else m
        for m in appointment.materials
    ]
    return _with_materials(appointment, materials)


def remove_material(appointment: Appointment, material_id: str) -> Appointment:
    return _with_materials(appointment, [m for m in appointment.materials if m.id != material_id])


def appointment_amount(appointment: Appointment) -> float:
    """
    Charged amount: finalValue. Records saved before finalValue existed carry
    0 there with no discount, so they fall back to value and then legacy price.
    """
    final_value = to_number(appointment.finalValue)
    if final_value or to_number(appointment.discount):
        return final_value
    return to_number(appointment.value) or to_number(appointment.price)
