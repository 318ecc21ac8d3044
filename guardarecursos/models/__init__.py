from .actividad import Actividad
from .area import Area
from .departamento import Departamento
from .ecosistema import Ecosistema
from .equipo import Equipo
from .fotografia import Fotografia
from .geolocalizacion import Geolocalizacion
from .hallazgo import Hallazgo
from .incidente import Incidente
from .rol import Rol
from .seguimiento import Seguimiento
from .tipo_actividad import TipoActividad
from .usuario import Usuario


__all__ = [
    "Actividad",
    "Area",
    "Departamento",
    "Ecosistema",
    "Equipo",
    "Fotografia",
    "Geolocalizacion",
    "Hallazgo",
    "Incidente",
    "Rol",
    "Seguimiento",
    "TipoActividad",
    "Usuario",
]
