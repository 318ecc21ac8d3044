# =================================================================
# Roles del Sistema
# =================================================================
# Nombres de los roles definidos en la base de datos.
# Total: 3 roles.
# =================================================================
from typing import Dict, List, Optional

ADMIN_ROLE_NAME = "Administrador"
COORDINADOR_ROLE_NAME = "Coordinador"
GUARDARECURSO_ROLE_NAME = "Guardarecurso"

ROLES_SISTEMA = [ADMIN_ROLE_NAME, COORDINADOR_ROLE_NAME, GUARDARECURSO_ROLE_NAME]


# =================================================================
# Módulos del Sistema
# =================================================================
# Identificadores de los módulos sobre los que se evalúan permisos.
# =================================================================

MOD_DASHBOARD = "dashboard"
MOD_REGISTRO_GUARDA = "registro-guarda"
MOD_ASIGNACION_ZONAS = "asignacion-zonas"
MOD_CONTROL_EQUIPOS = "control-equipos"
MOD_PLANIFICACION = "planificacion"
MOD_REGISTRO_DIARIO = "registro-diario"
MOD_EVIDENCIAS = "evidencias"
MOD_GEOLOCALIZACION = "geolocalizacion"
MOD_HALLAZGOS = "hallazgos"
MOD_SEGUIMIENTO = "seguimiento"
MOD_INCIDENTES = "incidentes"
MOD_USUARIOS = "usuarios"
# Referenciado por los reportes pero sin fila en la matriz: siempre sin acceso.
MOD_REPORTES = "reportes"

MODULOS = [
    MOD_DASHBOARD, MOD_REGISTRO_GUARDA, MOD_ASIGNACION_ZONAS, MOD_CONTROL_EQUIPOS,
    MOD_PLANIFICACION, MOD_REGISTRO_DIARIO, MOD_EVIDENCIAS, MOD_GEOLOCALIZACION,
    MOD_HALLAZGOS, MOD_SEGUIMIENTO, MOD_INCIDENTES, MOD_USUARIOS,
]


# =================================================================
# Acciones
# =================================================================

ACCION_VER = "ver"
ACCION_CREAR = "crear"
ACCION_EDITAR = "editar"
ACCION_ELIMINAR = "eliminar"

ACCIONES = [ACCION_VER, ACCION_CREAR, ACCION_EDITAR, ACCION_ELIMINAR]

PermisosModulo = Dict[str, bool]


def _permisos(ver: bool, crear: bool, editar: bool, eliminar: bool) -> PermisosModulo:
    return {ACCION_VER: ver, ACCION_CREAR: crear, ACCION_EDITAR: editar, ACCION_ELIMINAR: eliminar}

_TODO = _permisos(True, True, True, True)
_NADA = _permisos(False, False, False, False)


# =================================================================
# Matriz rol -> módulo -> acción
# =================================================================

_MATRIZ_ADMIN: Dict[str, PermisosModulo] = {modulo: dict(_TODO) for modulo in MODULOS}
_MATRIZ_ADMIN[MOD_REGISTRO_DIARIO] = _permisos(True, False, False, True)
_MATRIZ_ADMIN[MOD_INCIDENTES] = _permisos(True, False, True, True)

_MATRIZ_COORDINADOR: Dict[str, PermisosModulo] = {modulo: dict(permisos) for modulo, permisos in _MATRIZ_ADMIN.items()}
_MATRIZ_COORDINADOR[MOD_USUARIOS] = dict(_NADA)

_MATRIZ_GUARDARECURSO: Dict[str, PermisosModulo] = {modulo: dict(_NADA) for modulo in MODULOS}
_MATRIZ_GUARDARECURSO[MOD_CONTROL_EQUIPOS] = _permisos(True, False, False, False)
_MATRIZ_GUARDARECURSO[MOD_REGISTRO_DIARIO] = _permisos(True, True, True, False)
_MATRIZ_GUARDARECURSO[MOD_INCIDENTES] = _permisos(True, True, False, False)

MATRIZ_PERMISOS: Dict[str, Dict[str, PermisosModulo]] = {
    ADMIN_ROLE_NAME: _MATRIZ_ADMIN,
    COORDINADOR_ROLE_NAME: _MATRIZ_COORDINADOR,
    GUARDARECURSO_ROLE_NAME: _MATRIZ_GUARDARECURSO,
}


def get_module_permissions(rol: Optional[str], modulo: str) -> PermisosModulo:
    """Permisos de un rol sobre un módulo. Rol o módulo desconocido: todo en False."""
    permisos = MATRIZ_PERMISOS.get(rol or "", {}).get(modulo)
    return dict(permisos) if permisos else dict(_NADA)


def has_module_access(rol: Optional[str], modulo: str) -> bool:
    return get_module_permissions(rol, modulo)[ACCION_VER]


def can_perform_action(rol: Optional[str], modulo: str, accion: str) -> bool:
    return get_module_permissions(rol, modulo).get(accion, False)


def get_role_permissions(rol: Optional[str]) -> Dict[str, PermisosModulo]:
    """Fila completa de la matriz para un rol."""
    return {modulo: get_module_permissions(rol, modulo) for modulo in MODULOS}


def get_accessible_modules(rol: Optional[str]) -> List[str]:
    return [modulo for modulo in MODULOS if has_module_access(rol, modulo)]


def can_use_filters(rol: Optional[str], modulo: str) -> bool:
    if rol == GUARDARECURSO_ROLE_NAME:
        return False
    return has_module_access(rol, modulo)


def can_change_status(rol: Optional[str], modulo: str) -> bool:
    if rol == GUARDARECURSO_ROLE_NAME:
        return False
    return can_perform_action(rol, modulo, ACCION_EDITAR)


def can_view_history(rol: Optional[str], modulo: str) -> bool:
    if rol == GUARDARECURSO_ROLE_NAME:
        return False
    return has_module_access(rol, modulo)
