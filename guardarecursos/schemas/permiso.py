from typing import Dict, List

from pydantic import BaseModel


class PermisosModulo(BaseModel):
    ver: bool
    crear: bool
    editar: bool
    eliminar: bool


class MisPermisos(BaseModel):
    """Fila de la matriz de permisos correspondiente al rol del usuario."""
    rol: str
    modulos: Dict[str, PermisosModulo]
    modulos_accesibles: List[str]
