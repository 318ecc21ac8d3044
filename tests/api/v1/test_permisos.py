import pytest
from httpx import AsyncClient
from fastapi import status

from guardarecursos.core import permissions as perms
from guardarecursos.core.config import settings


def _h(token: str) -> dict:
    assert token, "No se pudo obtener el token de autenticación."
    return {"Authorization": f"Bearer {token}"}


# ==============================================================================
# Matriz de permisos
# ==============================================================================

def test_admin_tiene_todos_los_modulos():
    assert perms.get_accessible_modules(perms.ADMIN_ROLE_NAME) == perms.MODULOS
    assert perms.can_perform_action(perms.ADMIN_ROLE_NAME, perms.MOD_USUARIOS, perms.ACCION_ELIMINAR)


def test_admin_no_ejecuta_registro_diario_ni_crea_incidentes():
    permisos = perms.get_module_permissions(perms.ADMIN_ROLE_NAME, perms.MOD_REGISTRO_DIARIO)
    assert permisos == {"ver": True, "crear": False, "editar": False, "eliminar": True}
    assert not perms.can_perform_action(perms.ADMIN_ROLE_NAME, perms.MOD_INCIDENTES, perms.ACCION_CREAR)
    assert perms.can_perform_action(perms.ADMIN_ROLE_NAME, perms.MOD_INCIDENTES, perms.ACCION_EDITAR)


def test_coordinador_sin_gestion_de_usuarios():
    assert not perms.has_module_access(perms.COORDINADOR_ROLE_NAME, perms.MOD_USUARIOS)
    assert perms.MOD_USUARIOS not in perms.get_accessible_modules(perms.COORDINADOR_ROLE_NAME)
    assert perms.can_perform_action(perms.COORDINADOR_ROLE_NAME, perms.MOD_PLANIFICACION, perms.ACCION_CREAR)


def test_guardarecurso_modulos_accesibles():
    assert perms.get_accessible_modules(perms.GUARDARECURSO_ROLE_NAME) == [
        perms.MOD_CONTROL_EQUIPOS, perms.MOD_REGISTRO_DIARIO, perms.MOD_INCIDENTES,
    ]
    assert perms.can_perform_action(perms.GUARDARECURSO_ROLE_NAME, perms.MOD_REGISTRO_DIARIO, perms.ACCION_EDITAR)
    assert not perms.can_perform_action(perms.GUARDARECURSO_ROLE_NAME, perms.MOD_REGISTRO_DIARIO, perms.ACCION_ELIMINAR)
    assert not perms.can_perform_action(perms.GUARDARECURSO_ROLE_NAME, perms.MOD_CONTROL_EQUIPOS, perms.ACCION_CREAR)


@pytest.mark.parametrize("rol", [None, "", "Visitante"])
def test_rol_desconocido_sin_acceso(rol):
    assert perms.get_accessible_modules(rol) == []
    assert not perms.can_perform_action(rol, perms.MOD_DASHBOARD, perms.ACCION_VER)


def test_modulo_reportes_sin_fila():
    for rol in perms.ROLES_SISTEMA:
        assert not perms.has_module_access(rol, perms.MOD_REPORTES)


def test_filtros_estado_e_historial():
    for modulo in (perms.MOD_HALLAZGOS, perms.MOD_INCIDENTES):
        assert perms.can_use_filters(perms.COORDINADOR_ROLE_NAME, modulo)
        assert perms.can_change_status(perms.ADMIN_ROLE_NAME, modulo)
        assert perms.can_view_history(perms.ADMIN_ROLE_NAME, modulo)
        assert not perms.can_use_filters(perms.GUARDARECURSO_ROLE_NAME, modulo)
        assert not perms.can_change_status(perms.GUARDARECURSO_ROLE_NAME, modulo)
        assert not perms.can_view_history(perms.GUARDARECURSO_ROLE_NAME, modulo)


def test_permisos_devueltos_son_copias():
    permisos = perms.get_module_permissions(perms.GUARDARECURSO_ROLE_NAME, perms.MOD_USUARIOS)
    permisos[perms.ACCION_VER] = True
    assert not perms.has_module_access(perms.GUARDARECURSO_ROLE_NAME, perms.MOD_USUARIOS)


# ==============================================================================
# Endpoints
# ==============================================================================

async def test_mis_permisos_guardarecurso(client: AsyncClient, auth_token_guardarecurso: str):
    response = await client.get(f"{settings.API_V1_STR}/permisos/mis-permisos", headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()
    assert body["rol"] == perms.GUARDARECURSO_ROLE_NAME
    assert body["modulos_accesibles"] == ["control-equipos", "registro-diario", "incidentes"]
    assert body["modulos"]["incidentes"] == {"ver": True, "crear": True, "editar": False, "eliminar": False}
    assert set(body["modulos"]) == set(perms.MODULOS)


@pytest.mark.parametrize(
    "metodo, ruta, rol",
    [
        ("get", "/usuarios/", "coordinador"),
        ("get", "/usuarios/", "guardarecurso"),
        ("get", "/dashboard/stats", "guardarecurso"),
        ("get", "/areas/", "guardarecurso"),
        ("get", "/guardarecursos/", "guardarecurso"),
        ("get", "/hallazgos/", "guardarecurso"),
        ("post", "/equipos/", "guardarecurso"),
        ("post", "/incidentes/", "admin"),
        ("post", "/incidentes/", "coordinador"),
        ("post", "/init/data", "coordinador"),
    ],
)
async def test_acceso_denegado_por_rol(
    client: AsyncClient,
    auth_token_admin: str,
    auth_token_coordinador: str,
    auth_token_guardarecurso: str,
    metodo: str,
    ruta: str,
    rol: str,
):
    token = {
        "admin": auth_token_admin,
        "coordinador": auth_token_coordinador,
        "guardarecurso": auth_token_guardarecurso,
    }[rol]
    response = await client.request(metodo.upper(), f"{settings.API_V1_STR}{ruta}", json={}, headers=_h(token))
    assert response.status_code == status.HTTP_403_FORBIDDEN, response.text
