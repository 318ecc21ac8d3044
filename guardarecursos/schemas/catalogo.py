from typing import Optional

from pydantic import BaseModel, ConfigDict


class Departamento(BaseModel):
    id: int
    nombre: str

    model_config = ConfigDict(from_attributes=True)


class Ecosistema(BaseModel):
    id: int
    nombre: str
    descripcion: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TipoActividad(BaseModel):
    id: int
    nombre: str
    descripcion: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
