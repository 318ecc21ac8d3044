from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .catalogo import TipoActividad
from .common import Coordenadas
from .enums import EstadoActividadEnum
from .hallazgo import HallazgoEnActividad, HallazgoSimple
from .usuario import UsuarioSimple


# ===============================================================
# Puntos GPS (geolocalización)
# ===============================================================
class PuntoCreate(BaseModel):
    """La marca de tiempo la asigna el servidor al insertar."""
    latitud: float = Field(..., ge=-90, le=90)
    longitud: float = Field(..., ge=-180, le=180)
    descripcion: Optional[str] = Field(None, max_length=500)

class Punto(BaseModel):
    id: int
    latitud: float
    longitud: float
    fecha: datetime
    descripcion: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# Evidencias
# ===============================================================
class EvidenciaCreate(BaseModel):
    url: str = Field(..., min_length=1, max_length=500)
    descripcion: Optional[str] = Field(None, max_length=1000)
    latitud: Optional[float] = Field(None, ge=-90, le=90)
    longitud: Optional[float] = Field(None, ge=-180, le=180)

class Evidencia(BaseModel):
    id: int
    url: str
    descripcion: Optional[str] = None
    latitud: Optional[float] = None
    longitud: Optional[float] = None
    fecha: datetime

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# Schema Base
# ===============================================================
class ActividadBase(BaseModel):
    """Campos base de una actividad planificada."""
    codigo: Optional[str] = Field(None, max_length=50)
    tipo: str = Field(..., min_length=1, description="Nombre (o ID) del tipo de actividad del catálogo")
    descripcion: str = Field(..., min_length=1, max_length=1000)
    fecha: date = Field(..., description="Fecha programada")
    hora_inicio: Optional[time] = Field(None, description="Hora programada; sin hora se asume 00:00")
    coordenadas: Optional[Coordenadas] = Field(None, description="Coordenadas de inicio previstas")
    guardarecurso_id: int = Field(..., description="Guardarecurso asignado")


# ===============================================================
# Schema para Creación
# ===============================================================
class ActividadCreate(ActividadBase):
    pass


# ===============================================================
# Schema para Actualización
# ===============================================================
class ActividadUpdate(BaseModel):
    """Edición libre de una actividad mientras está Programada."""
    codigo: Optional[str] = Field(None, max_length=50)
    tipo: Optional[str] = Field(None, min_length=1)
    descripcion: Optional[str] = Field(None, min_length=1, max_length=1000)
    fecha: Optional[date] = None
    hora_inicio: Optional[time] = None
    coordenadas: Optional[Coordenadas] = None
    guardarecurso_id: Optional[int] = None


# ===============================================================
# Transiciones del ciclo de vida
# ===============================================================
class IniciarActividad(BaseModel):
    coordenadas_inicio: Optional[Coordenadas] = None

class FinalizarActividad(BaseModel):
    coordenadas_fin: Optional[Coordenadas] = None
    observaciones: Optional[str] = Field(None, max_length=500)
    hallazgos: List[HallazgoEnActividad] = Field(default_factory=list)
    evidencias: List[EvidenciaCreate] = Field(default_factory=list)


# ===============================================================
# Schema para Respuesta API
# ===============================================================
class Actividad(BaseModel):
    id: int
    codigo: Optional[str] = None
    descripcion: str
    estado: EstadoActividadEnum
    tipo: TipoActividad
    usuario_id: int
    guardarecurso: UsuarioSimple
    fecha_programada: datetime
    fecha_inicio: Optional[datetime] = None
    fecha_fin: Optional[datetime] = None
    latitud_inicio: Optional[float] = None
    longitud_inicio: Optional[float] = None
    latitud_fin: Optional[float] = None
    longitud_fin: Optional[float] = None
    observaciones: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class ActividadDetalle(Actividad):
    """Incluye la ruta GPS, los hallazgos y las evidencias de la actividad."""
    puntos: List[Punto] = []
    hallazgos: List[HallazgoSimple] = []
    evidencias: List[Evidencia] = []


# ===============================================================
# Carga masiva
# ===============================================================
class ErrorCarga(BaseModel):
    indice: int
    codigo: Optional[str] = None
    error: str

class ResultadoCargaMasiva(BaseModel):
    cargadas: int
    con_error: int
    actividades: List[Actividad]
    errores: List[ErrorCarga]


# ===============================================================
# Rutas de patrullaje
# ===============================================================
class Ruta(BaseModel):
    id: int
    codigo: Optional[str] = None
    tipo: str
    descripcion: str
    guardarecurso: UsuarioSimple
    fecha_programada: datetime
    fecha_inicio: Optional[datetime] = None
    fecha_fin: Optional[datetime] = None
    puntos: List[Punto]
    tiene_gps: bool

class CargaMasiva(BaseModel):
    """Cada elemento se valida por separado para no rechazar la carga completa por un error."""
    actividades: List[Dict[str, Any]] = Field(..., min_length=1)
