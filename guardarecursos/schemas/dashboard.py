from typing import Optional
from pydantic import BaseModel, Field

# Schema principal para las métricas del dashboard
class DashboardStats(BaseModel):
    total_areas_activas: int = Field(..., ge=0, description="Áreas protegidas en estado Activo")
    total_guardarecursos_activos: int = Field(..., ge=0, description="Guardarecursos en estado Activo")
    total_actividades: int = Field(..., ge=0, description="Total de actividades registradas")
    actividades_hoy: int = Field(..., ge=0, description="Actividades programadas para hoy (hora local)")

# Área activa con los datos necesarios para el mapa
class AreaDashboard(BaseModel):
    id: int
    nombre: str
    latitud: float
    longitud: float
    descripcion: Optional[str] = None
    extension: Optional[float] = None
    departamento: Optional[str] = None
    ecosistema: Optional[str] = None
