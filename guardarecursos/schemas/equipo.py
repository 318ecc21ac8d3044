from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from .enums import EstadoEquipoEnum
from .usuario import UsuarioSimple

# ===============================================================
# Schema Base
# ===============================================================
class EquipoBase(BaseModel):
    """Campos base que definen un equipo de campo."""
    nombre: str = Field(..., min_length=1, max_length=100)
    codigo: str = Field(..., min_length=1, max_length=50, description="Código de inventario único")
    tipo: Optional[str] = Field(None, max_length=50)
    marca: Optional[str] = Field(None, max_length=50)
    modelo: Optional[str] = Field(None, max_length=50)
    observaciones: Optional[str] = Field(None, max_length=500)

# ===============================================================
# Schema para Creación
# ===============================================================
class EquipoCreate(EquipoBase):
    usuario_id: Optional[int] = Field(None, description="Guardarecurso al que se asigna el equipo")

# ===============================================================
# Schema para Actualización
# ===============================================================
class EquipoUpdate(BaseModel):
    """Solo las observaciones y el guardarecurso asignado son editables."""
    observaciones: Optional[str] = Field(None, max_length=500)
    usuario_id: Optional[int] = None

class EquipoEstadoUpdate(BaseModel):
    estado: EstadoEquipoEnum

# ===============================================================
# Schema para Respuesta API
# ===============================================================
class Equipo(EquipoBase):
    id: int
    estado: EstadoEquipoEnum
    usuario_id: Optional[int] = None
    guardarecurso: Optional[UsuarioSimple] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
