from .common import Msg, Coordenadas, HealthCheck

# Token & Auth
from .token import Token, TokenPayload
from .password import CambioContrasenaAdmin, CambioContrasenaPropia

# Usuarios y Guardarecursos
from .usuario import (
    Usuario, UsuarioCreate, UsuarioUpdate, UsuarioEstadoUpdate, UsuarioSimple,
    GuardarecursoCreate, GuardarecursoUpdate, RolSimple, AreaAsignada,
)

# Catálogos
from .catalogo import Departamento, Ecosistema, TipoActividad

# Áreas protegidas
from .area import Area, AreaCreate, AreaUpdate, AreaEstadoUpdate

# Equipos
from .equipo import Equipo, EquipoCreate, EquipoUpdate, EquipoEstadoUpdate

# Hallazgos, Incidentes y Seguimientos
from .seguimiento import Seguimiento, SeguimientoCreate
from .hallazgo import (
    Hallazgo, HallazgoCreate, HallazgoEnActividad, HallazgoEstadoUpdate, HallazgoSimple,
)
from .incidente import Incidente, IncidenteCreate, IncidenteEstadoUpdate

# Actividades y Geolocalización
from .actividad import (
    Actividad, ActividadCreate, ActividadUpdate, ActividadDetalle,
    IniciarActividad, FinalizarActividad, Punto, PuntoCreate,
    Evidencia, EvidenciaCreate, ResultadoCargaMasiva, ErrorCarga, Ruta, CargaMasiva,
)

# Dashboard, Permisos e Inicialización
from .dashboard import DashboardStats, AreaDashboard
from .permiso import MisPermisos, PermisosModulo
from .init import InitResultado, InitEstado
