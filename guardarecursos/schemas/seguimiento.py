from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict

from .usuario import UsuarioSimple


class SeguimientoCreate(BaseModel):
    accion: str = Field(..., min_length=1, max_length=200)
    observaciones: str = Field(..., min_length=1, max_length=1000)


class Seguimiento(BaseModel):
    id: int
    accion: str
    observaciones: str
    fecha: datetime
    usuario: UsuarioSimple

    model_config = ConfigDict(from_attributes=True)
