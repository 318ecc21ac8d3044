from typing import Dict, List

from pydantic import BaseModel


class InitResultado(BaseModel):
    """Elementos creados por catálogo en la inicialización de datos base."""
    created: Dict[str, List[str]]


class InitEstado(BaseModel):
    initialized: bool
    missing: List[str]
