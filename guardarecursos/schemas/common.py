from typing import Optional

from pydantic import BaseModel, Field

class Msg(BaseModel):
    """Schema genérico para mensajes de respuesta."""
    msg: str

class Coordenadas(BaseModel):
    """Par latitud/longitud validado en rangos geográficos."""
    lat: float = Field(..., ge=-90, le=90, description="Latitud en grados decimales")
    lng: float = Field(..., ge=-180, le=180, description="Longitud en grados decimales")

class HealthCheck(BaseModel):
    status: str = "ok"
    timestamp: Optional[str] = None
