import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from guardarecursos.core.config import settings
from guardarecursos.core.password import verify_password
from guardarecursos.models.area import Area
from guardarecursos.models.usuario import Usuario

from conftest import TEST_ADMIN_PASSWORD, TEST_COORDINADOR_PASSWORD, TEST_GUARDARECURSO_PASSWORD

URL = f"{settings.API_V1_STR}/usuarios"
URL_GUARDAS = f"{settings.API_V1_STR}/guardarecursos"


def _h(token: str) -> dict:
    assert token, "No se pudo obtener el token de autenticación."
    return {"Authorization": f"Bearer {token}"}


# ==============================================================================
# Gestión de usuarios (Administradores y Coordinadores)
# ==============================================================================

@pytest.mark.asyncio
async def test_crear_coordinador(client: AsyncClient, auth_token_admin: str, login):
    datos = {
        "nombre": "Lucía",
        "apellido": "Pérez",
        "email": " Lucia.Perez@CONAP.gob.gt",
        "telefono": "5555-1234",
        "dpi": "3234567890101",
        "password": "Coordina2026",
    }
    response = await client.post(f"{URL}/", json=datos, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["email"] == "lucia.perez@conap.gob.gt"
    assert body["telefono"] == "55551234"
    assert body["rol"]["nombre"] == "Coordinador"
    assert body["estado"] == "Activo"
    assert "password" not in body and "hashed_password" not in body

    assert await login("lucia.perez@conap.gob.gt", "Coordina2026")


@pytest.mark.asyncio
async def test_crear_coordinador_email_duplicado(
    client: AsyncClient, auth_token_admin: str, coordinador_user: Usuario
):
    datos = {"nombre": "Otro", "apellido": "Usuario", "email": coordinador_user.email, "password": "Clave123"}
    response = await client.post(f"{URL}/", json=datos, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Ya existe un usuario con este correo electrónico"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "campo, valor",
    [("email", "no-es-correo"), ("dpi", "12345"), ("telefono", "123"), ("password", "corta")],
)
async def test_crear_coordinador_datos_invalidos(client: AsyncClient, auth_token_admin: str, campo: str, valor: str):
    datos = {"nombre": "Pedro", "apellido": "Ramírez", "email": "pedro@conap.gob.gt", "password": "Clave123"}
    datos[campo] = valor
    response = await client.post(f"{URL}/", json=datos, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert any(e["field"] == campo for e in response.json()["errors"])


@pytest.mark.asyncio
async def test_listar_usuarios_excluye_guardarecursos(
    client: AsyncClient, auth_token_admin: str, coordinador_user: Usuario, guardarecurso_user: Usuario
):
    response = await client.get(f"{URL}/", headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_200_OK
    roles = {u["email"]: u["rol"]["nombre"] for u in response.json()}
    assert roles == {"admin@conap.gob.gt": "Administrador", "coordinador@conap.gob.gt": "Coordinador"}


@pytest.mark.asyncio
async def test_actualizar_usuario(client: AsyncClient, auth_token_admin: str, coordinador_user: Usuario, admin_user: Usuario):
    response = await client.put(
        f"{URL}/{coordinador_user.id}", json={"nombre": "Carla", "telefono": "44443333"}, headers=_h(auth_token_admin)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["nombre"] == "Carla"
    assert response.json()["apellido"] == "Coordinador"

    response = await client.put(
        f"{URL}/{coordinador_user.id}", json={"email": admin_user.email}, headers=_h(auth_token_admin)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_cambiar_estado_usuario(
    client: AsyncClient, db: Session, auth_token_admin: str, admin_user: Usuario, coordinador_user: Usuario, login
):
    response = await client.patch(
        f"{URL}/{coordinador_user.id}/estado", json={"estado": "Suspendido"}, headers=_h(auth_token_admin)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["estado"] == "Suspendido"
    assert await login(coordinador_user.email, TEST_COORDINADOR_PASSWORD) is None

    response = await client.patch(f"{URL}/{admin_user.id}/estado", json={"estado": "Desactivado"}, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "No puede cambiar el estado de su propio usuario."

    response = await client.patch(f"{URL}/{coordinador_user.id}/estado", json={"estado": "Jubilado"}, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# ==============================================================================
# Perfil
# ==============================================================================

@pytest.mark.asyncio
async def test_perfil_propio(client: AsyncClient, auth_token_guardarecurso: str, guardarecurso_user: Usuario, area_protegida: Area):
    response = await client.get(f"{URL}/perfil/{guardarecurso_user.email.upper()}", headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()
    assert body["id"] == guardarecurso_user.id
    assert body["area"]["nombre"] == area_protegida.nombre
    assert body["rol"]["nombre"] == "Guardarecurso"


@pytest.mark.asyncio
async def test_perfil_ajeno(
    client: AsyncClient,
    auth_token_guardarecurso: str,
    auth_token_coordinador: str,
    admin_user: Usuario,
    otro_guardarecurso_user: Usuario,
):
    # Un guardarecurso no consulta perfiles ajenos
    response = await client.get(f"{URL}/perfil/{otro_guardarecurso_user.email}", headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    # El Coordinador ve guardarecursos pero no administradores
    response = await client.get(f"{URL}/perfil/{otro_guardarecurso_user.email}", headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_200_OK
    response = await client.get(f"{URL}/perfil/{admin_user.email}", headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_perfil_email_invalido_o_inexistente(client: AsyncClient, auth_token_admin: str):
    response = await client.get(f"{URL}/perfil/sin-arroba", headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    response = await client.get(f"{URL}/perfil/nadie@conap.gob.gt", headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


# ==============================================================================
# Cambio de contraseña de otro usuario
# ==============================================================================

@pytest.mark.asyncio
async def test_admin_cambia_contrasena_de_coordinador(
    client: AsyncClient, db: Session, auth_token_admin: str, coordinador_user: Usuario, login
):
    response = await client.post(
        f"{URL}/{coordinador_user.id}/cambiar-contrasena", json={"nueva_contrasena": "Renovada1"}, headers=_h(auth_token_admin)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert "Carlos Coordinador" in response.json()["msg"]

    db.refresh(coordinador_user)
    assert verify_password("Renovada1", coordinador_user.hashed_password)
    assert await login(coordinador_user.email, TEST_COORDINADOR_PASSWORD) is None
    assert await login(coordinador_user.email, "Renovada1")


@pytest.mark.asyncio
async def test_coordinador_cambia_contrasena_de_guardarecurso(
    client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario, login
):
    response = await client.post(
        f"{URL}/{guardarecurso_user.id}/cambiar-contrasena", json={"nueva_contrasena": "Campo2026"}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert await login(guardarecurso_user.email, "Campo2026")


@pytest.mark.asyncio
@pytest.mark.parametrize("nueva", ["ClaveValida2026", "abc", ""])
async def test_coordinador_no_cambia_contrasena_de_administrador(
    client: AsyncClient, db: Session, auth_token_coordinador: str, admin_user: Usuario, nueva: str
):
    """Se rechaza con 403 sin importar si la contraseña nueva es válida."""
    response = await client.post(
        f"{URL}/{admin_user.id}/cambiar-contrasena", json={"nueva_contrasena": nueva}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    db.refresh(admin_user)
    assert verify_password(TEST_ADMIN_PASSWORD, admin_user.hashed_password)


@pytest.mark.asyncio
async def test_reglas_de_cambio_de_contrasena(
    client: AsyncClient,
    auth_token_admin: str,
    auth_token_coordinador: str,
    auth_token_guardarecurso: str,
    admin_user: Usuario,
    coordinador_user: Usuario,
    otro_guardarecurso_user: Usuario,
):
    def _url(usuario_id: int) -> str:
        return f"{URL}/{usuario_id}/cambiar-contrasena"

    # Ni siquiera otro Administrador cambia la de un Administrador por esta vía
    response = await client.post(_url(admin_user.id), json={"nueva_contrasena": "Nueva2026"}, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    # Coordinador sobre otro Coordinador
    response = await client.post(_url(coordinador_user.id), json={"nueva_contrasena": "Nueva2026"}, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    # Guardarecurso como actor
    response = await client.post(
        _url(otro_guardarecurso_user.id), json={"nueva_contrasena": "Nueva2026"}, headers=_h(auth_token_guardarecurso)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.post(_url(9999), json={"nueva_contrasena": "Nueva2026"}, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = await client.post(
        _url(otro_guardarecurso_user.id), json={"nueva_contrasena": "abc"}, headers=_h(auth_token_admin)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "La contraseña debe tener al menos 6 caracteres."


# ==============================================================================
# Guardarecursos
# ==============================================================================

@pytest.mark.asyncio
async def test_registrar_guardarecurso(
    client: AsyncClient, auth_token_coordinador: str, area_protegida: Area, login
):
    datos = {
        "nombre": "Julio",
        "apellido": "Caal",
        "email": "julio.caal@conap.gob.gt",
        "dpi": "4234567890101",
        "telefono": "55559876",
        "password": "Selva2026",
        "area_id": area_protegida.id,
    }
    response = await client.post(f"{URL_GUARDAS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["rol"]["nombre"] == "Guardarecurso"
    assert body["area"]["id"] == area_protegida.id
    assert await login("julio.caal@conap.gob.gt", "Selva2026")

    response = await client.get(f"{URL_GUARDAS}/", headers=_h(auth_token_coordinador))
    assert [g["email"] for g in response.json()] == ["julio.caal@conap.gob.gt"]


@pytest.mark.asyncio
async def test_registrar_guardarecurso_duplicado(
    client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario
):
    datos = {"nombre": "Copia", "apellido": "Duplicada", "email": guardarecurso_user.email, "password": "Selva2026"}
    response = await client.post(f"{URL_GUARDAS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Ya existe un guardarecurso con este correo electrónico"

    datos = {"nombre": "Copia", "apellido": "Duplicada", "email": "copia@conap.gob.gt", "dpi": guardarecurso_user.dpi, "password": "Selva2026"}
    response = await client.post(f"{URL_GUARDAS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_registrar_guardarecurso_area_inexistente(client: AsyncClient, auth_token_coordinador: str):
    datos = {"nombre": "Sin", "apellido": "Area", "email": "sin.area@conap.gob.gt", "password": "Selva2026", "area_id": 9999}
    response = await client.post(f"{URL_GUARDAS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_actualizar_guardarecurso(
    client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario, coordinador_user: Usuario
):
    response = await client.put(
        f"{URL_GUARDAS}/{guardarecurso_user.id}", json={"telefono": "77778888", "area_id": None}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["telefono"] == "77778888"
    assert response.json()["area"] is None
    assert response.json()["nombre"] == "Gabriela"

    # Un coordinador no se edita como guardarecurso
    response = await client.put(f"{URL_GUARDAS}/{coordinador_user.id}", json={"telefono": "77778888"}, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_suspender_guardarecurso(
    client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario, login
):
    response = await client.patch(
        f"{URL_GUARDAS}/{guardarecurso_user.id}/estado", json={"estado": "Suspendido"}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert await login(guardarecurso_user.email, TEST_GUARDARECURSO_PASSWORD) is None
