from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .common import Coordenadas
from .enums import EstadoHallazgoEnum, PrioridadHallazgoEnum
from .seguimiento import Seguimiento
from .usuario import UsuarioSimple

# ===============================================================
# Schema para Creación
# ===============================================================
class HallazgoCreate(BaseModel):
    """Hallazgo reportado fuera de una actividad; las coordenadas son obligatorias."""
    titulo: str = Field(..., min_length=1, max_length=100)
    descripcion: str = Field(..., min_length=1, max_length=1000)
    prioridad: PrioridadHallazgoEnum = PrioridadHallazgoEnum.MEDIA
    coordenadas: Coordenadas

class HallazgoEnActividad(BaseModel):
    """Hallazgo registrado durante un patrullaje o al finalizarlo."""
    titulo: str = Field(..., min_length=1, max_length=100)
    descripcion: str = Field(..., min_length=1, max_length=1000)
    gravedad: PrioridadHallazgoEnum = PrioridadHallazgoEnum.MEDIA
    latitud: Optional[float] = Field(None, ge=-90, le=90)
    longitud: Optional[float] = Field(None, ge=-180, le=180)

class HallazgoEstadoUpdate(BaseModel):
    estado: EstadoHallazgoEnum

# ===============================================================
# Schemas para Respuesta API
# ===============================================================
class HallazgoSimple(BaseModel):
    id: int
    titulo: str
    prioridad: PrioridadHallazgoEnum
    estado: EstadoHallazgoEnum
    usuario_id: int
    fecha: datetime

    model_config = ConfigDict(from_attributes=True)

class Hallazgo(HallazgoSimple):
    descripcion: str
    latitud: Optional[float] = None
    longitud: Optional[float] = None
    actividad_id: Optional[int] = None
    usuario: UsuarioSimple
    seguimientos: List[Seguimiento] = []
