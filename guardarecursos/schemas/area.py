from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .catalogo import Departamento, Ecosistema
from .enums import EstadoAreaEnum

DEFAULT_ECOSISTEMA = "Bosque Tropical Húmedo"

# ===============================================================
# Schema Base
# ===============================================================
class AreaBase(BaseModel):
    """Campos base que definen un área protegida."""
    nombre: str = Field(..., min_length=1, max_length=150)
    descripcion: Optional[str] = Field(None, max_length=1000)
    extension: Optional[float] = Field(None, ge=0, description="Extensión en hectáreas")
    lat: float = Field(..., ge=-90, le=90, description="Latitud del centro del área")
    lng: float = Field(..., ge=-180, le=180, description="Longitud del centro del área")


# ===============================================================
# Schema para Creación
# ===============================================================
class AreaCreate(AreaBase):
    """
    El departamento se indica por nombre y se crea si no existe.
    Del listado de ecosistemas se toma el primero; si viene vacío
    se usa el ecosistema por defecto.
    """
    departamento: str = Field(..., min_length=1, max_length=100)
    ecosistemas: List[str] = Field(default_factory=list)


# ===============================================================
# Schema para Actualización
# ===============================================================
class AreaUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=150)
    descripcion: Optional[str] = Field(None, max_length=1000)
    extension: Optional[float] = Field(None, ge=0)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    departamento: Optional[str] = Field(None, min_length=1, max_length=100)
    ecosistemas: Optional[List[str]] = None

class AreaEstadoUpdate(BaseModel):
    estado: EstadoAreaEnum


# ===============================================================
# Schema para Respuesta API
# ===============================================================
class Area(BaseModel):
    id: int
    nombre: str
    descripcion: Optional[str] = None
    extension: Optional[float] = None
    latitud: float
    longitud: float
    estado: EstadoAreaEnum
    departamento: Departamento
    ecosistema: Optional[Ecosistema] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
