"""
Pydantic models for request/response validation

Python attributes follow the table columns; the JSON wire names (aliases)
are the ones the gym dashboard speaks.
"""
from datetime import date, datetime
from typing import Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

ClientStatus = Literal["ACTIVO", "INACTIVO", "MOROSO"]


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ClientCreateRequest(WireModel):
    """New gym member"""
    first_name: str = Field(alias="nombre", min_length=1, max_length=120)
    last_name: Optional[str] = Field(default=None, alias="apellido", max_length=120)
    phone: Optional[str] = Field(default=None, alias="telefono", max_length=40)
    email: Optional[str] = Field(default=None, max_length=254)
    status: ClientStatus = Field(default="ACTIVO", alias="estado")
    membership_started_on: Optional[date] = Field(default=None, alias="fechaInicioMembresia")
    membership_expires_on: Optional[date] = Field(default=None, alias="fechaVencimiento")
    notes: Optional[str] = Field(default=None, alias="notas")


class ClientResponse(WireModel):
    id: int
    gym_id: int = Field(alias="gymId")
    first_name: str = Field(alias="nombre")
    last_name: Optional[str] = Field(default=None, alias="apellido")
    phone: Optional[str] = Field(default=None, alias="telefono")
    email: Optional[str] = None
    status: ClientStatus = Field(alias="estado")
    registered_on: date = Field(alias="fechaRegistro")
    membership_started_on: Optional[date] = Field(default=None, alias="fechaInicioMembresia")
    membership_expires_on: Optional[date] = Field(default=None, alias="fechaVencimiento")
    notes: Optional[str] = Field(default=None, alias="notas")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class MeasurementRequest(WireModel):
    """Body measurement payload; every circumference is in cm"""
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    client_id: int = Field(alias="clientId")
    measured_on: date = Field(alias="fecha")
    weight: float = Field(alias="peso")  # kg
    height: float = Field(alias="altura")  # cm
    chest_cm: float = Field(alias="pechoCm")
    waist_cm: float = Field(alias="cinturaCm")
    hip_cm: float = Field(alias="caderaCm")
    left_arm_cm: float = Field(alias="brazoIzqCm")
    right_arm_cm: float = Field(alias="brazoDerCm")
    left_leg_cm: float = Field(alias="piernaIzqCm")
    right_leg_cm: float = Field(alias="piernaDerCm")
    body_fat_pct: Optional[float] = Field(default=None, alias="grasaCorporal")
    notes: Optional[str] = Field(default=None, alias="notas")


class MeasurementResponse(WireModel):
    id: int
    gym_id: int = Field(alias="gymId")
    client_id: int = Field(alias="clientId")
    measured_on: date = Field(alias="fecha")
    weight: float = Field(alias="peso")
    height: float = Field(alias="altura")
    chest_cm: float = Field(alias="pechoCm")
    waist_cm: float = Field(alias="cinturaCm")
    hip_cm: float = Field(alias="caderaCm")
    left_arm_cm: float = Field(alias="brazoIzqCm")
    right_arm_cm: float = Field(alias="brazoDerCm")
    left_leg_cm: float = Field(alias="piernaIzqCm")
    right_leg_cm: float = Field(alias="piernaDerCm")
    body_fat_pct: Optional[float] = Field(default=None, alias="grasaCorporal")
    notes: Optional[str] = Field(default=None, alias="notas")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class Page(WireModel, Generic[T]):
    """One page of results, zero-based page number"""
    content: List[T]
    number: int
    size: int
    total_elements: int = Field(alias="totalElements")
    total_pages: int = Field(alias="totalPages")


class BackupResponse(WireModel):
    success: bool
    exit_code: int = Field(alias="exitCode")
    output: Optional[str] = None
