from enum import Enum

class EstadoUsuarioEnum(str, Enum):
    """Estados de un usuario; solo 'Activo' puede iniciar sesión y ser asignado."""
    ACTIVO = 'Activo'
    SUSPENDIDO = 'Suspendido'
    DESACTIVADO = 'Desactivado'

class EstadoAreaEnum(str, Enum):
    ACTIVO = 'Activo'
    DESACTIVADO = 'Desactivado'

class EstadoEquipoEnum(str, Enum):
    OPERATIVO = 'Operativo'
    EN_REPARACION = 'En Reparación'
    DESACTIVADO = 'Desactivado'

class EstadoActividadEnum(str, Enum):
    """Estados del ciclo de vida de una actividad de campo."""
    PROGRAMADA = 'Programada'
    EN_PROGRESO = 'En Progreso'
    COMPLETADA = 'Completada'
    CANCELADA = 'Cancelada'

class EstadoHallazgoEnum(str, Enum):
    REPORTADO = 'Reportado'
    EN_INVESTIGACION = 'En Investigación'
    EN_PROCESO = 'En Proceso'
    RESUELTO = 'Resuelto'

class PrioridadHallazgoEnum(str, Enum):
    BAJA = 'Baja'
    MEDIA = 'Media'
    ALTA = 'Alta'
    CRITICA = 'Crítica'

class EstadoIncidenteEnum(str, Enum):
    REPORTADO = 'Reportado'
    EN_ATENCION = 'En Atención'
    ESCALADO = 'Escalado'
    RESUELTO = 'Resuelto'

class GravedadIncidenteEnum(str, Enum):
    LEVE = 'Leve'
    MODERADO = 'Moderado'
    GRAVE = 'Grave'
    CRITICO = 'Crítico'
