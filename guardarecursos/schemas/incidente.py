from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .enums import EstadoIncidenteEnum, GravedadIncidenteEnum
from .seguimiento import Seguimiento
from .usuario import UsuarioSimple


class IncidenteCreate(BaseModel):
    titulo: str = Field(..., min_length=1, max_length=100)
    descripcion: str = Field(..., min_length=1, max_length=1000)
    gravedad: GravedadIncidenteEnum = GravedadIncidenteEnum.LEVE
    area_id: Optional[int] = None

class IncidenteEstadoUpdate(BaseModel):
    estado: EstadoIncidenteEnum

class Incidente(BaseModel):
    id: int
    titulo: str
    descripcion: str
    gravedad: GravedadIncidenteEnum
    estado: EstadoIncidenteEnum
    fecha: datetime
    area_id: Optional[int] = None
    usuario: UsuarioSimple
    seguimientos: List[Seguimiento] = []

    model_config = ConfigDict(from_attributes=True)
