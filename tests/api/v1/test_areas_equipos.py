import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.orm import Session

from guardarecursos.core.config import settings
from guardarecursos.models.area import Area
from guardarecursos.models.equipo import Equipo
from guardarecursos.models.usuario import Usuario
from guardarecursos.schemas.equipo import EquipoCreate
from guardarecursos.services.catalogo import departamento_service, ecosistema_service
from guardarecursos.services.equipo import equipo_service

URL_AREAS = f"{settings.API_V1_STR}/areas"
URL_EQUIPOS = f"{settings.API_V1_STR}/equipos"


def _h(token: str) -> dict:
    assert token, "No se pudo obtener el token de autenticación."
    return {"Authorization": f"Bearer {token}"}


# ==============================================================================
# Áreas protegidas
# ==============================================================================

@pytest.mark.asyncio
async def test_crear_area_con_departamento_nuevo(client: AsyncClient, db: Session, auth_token_coordinador: str):
    datos = {
        "nombre": "Reserva Ficticia del Norte",
        "descripcion": "Área de prueba",
        "extension": 1200.5,
        "lat": 16.1,
        "lng": -89.9,
        "departamento": "Departamento Nuevo",
        "ecosistemas": ["Sabana Inundable", "Humedales"],
    }
    response = await client.post(f"{URL_AREAS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["estado"] == "Activo"
    assert body["departamento"]["nombre"] == "Departamento Nuevo"
    assert body["ecosistema"]["nombre"] == "Sabana Inundable"
    assert body["latitud"] == 16.1

    assert departamento_service.get_by_name(db, nombre="Departamento Nuevo") is not None
    assert ecosistema_service.get_by_name(db, nombre="Sabana Inundable") is not None


@pytest.mark.asyncio
async def test_crear_area_ecosistema_por_defecto(client: AsyncClient, auth_token_admin: str):
    datos = {"nombre": "Biotopo de Prueba", "lat": 15.2, "lng": -90.2, "departamento": "Baja Verapaz"}
    response = await client.post(f"{URL_AREAS}/", json=datos, headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    assert response.json()["ecosistema"]["nombre"] == "Bosque Tropical Húmedo"


@pytest.mark.asyncio
async def test_crear_area_nombre_duplicado(client: AsyncClient, auth_token_coordinador: str, area_protegida: Area):
    datos = {"nombre": area_protegida.nombre.upper(), "lat": 15.0, "lng": -90.0, "departamento": "Petén"}
    response = await client.post(f"{URL_AREAS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Ya existe un área protegida con este nombre"


@pytest.mark.asyncio
async def test_crear_area_coordenadas_invalidas(client: AsyncClient, auth_token_coordinador: str):
    datos = {"nombre": "Fuera del mapa", "lat": 120, "lng": -90.0, "departamento": "Petén"}
    response = await client.post(f"{URL_AREAS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["field"] == "lat"


@pytest.mark.asyncio
async def test_actualizar_area(client: AsyncClient, auth_token_coordinador: str, area_protegida: Area):
    response = await client.put(
        f"{URL_AREAS}/{area_protegida.id}",
        json={"descripcion": "Descripción actualizada", "departamento": "Petén"},
        headers=_h(auth_token_coordinador),
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()
    assert body["descripcion"] == "Descripción actualizada"
    assert body["departamento"]["nombre"] == "Petén"
    assert body["nombre"] == area_protegida.nombre


@pytest.mark.asyncio
async def test_desactivar_area_con_guardarecurso_activo(
    client: AsyncClient, db: Session, auth_token_coordinador: str, area_protegida: Area, guardarecurso_user: Usuario
):
    response = await client.patch(
        f"{URL_AREAS}/{area_protegida.id}/estado", json={"estado": "Desactivado"}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "1 guardarecurso(s) asignado(s)" in response.json()["detail"]
    db.refresh(area_protegida)
    assert area_protegida.estado == "Activo"


@pytest.mark.asyncio
async def test_desactivar_area_sin_guardarecursos_activos(
    client: AsyncClient, db: Session, auth_token_coordinador: str, area_protegida: Area, guardarecurso_user: Usuario
):
    guardarecurso_user.estado = "Suspendido"
    db.commit()

    response = await client.patch(
        f"{URL_AREAS}/{area_protegida.id}/estado", json={"estado": "Desactivado"}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["estado"] == "Desactivado"

    response = await client.get(f"{URL_AREAS}/", params={"estado": "Activo"}, headers=_h(auth_token_coordinador))
    assert response.json() == []

    response = await client.patch(
        f"{URL_AREAS}/{area_protegida.id}/estado", json={"estado": "Activo"}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_area_inexistente(client: AsyncClient, auth_token_coordinador: str):
    response = await client.get(f"{URL_AREAS}/9999", headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_404_NOT_FOUND


# ==============================================================================
# Equipos
# ==============================================================================

@pytest.fixture(scope="function")
def equipo_asignado(db: Session, guardarecurso_user: Usuario) -> Equipo:
    equipo = equipo_service.create(db, obj_in=EquipoCreate(
        nombre="GPS Garmin", codigo="GPS-001", tipo="GPS", marca="Garmin", modelo="eTrex 22x",
        usuario_id=guardarecurso_user.id,
    ))
    db.commit()
    db.refresh(equipo)
    return equipo


@pytest.mark.asyncio
async def test_crear_equipo(client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario):
    datos = {"nombre": "Radio Motorola", "codigo": " RAD-010 ", "tipo": "Radio", "usuario_id": guardarecurso_user.id}
    response = await client.post(f"{URL_EQUIPOS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["codigo"] == "RAD-010"
    assert body["estado"] == "Operativo"
    assert body["guardarecurso"]["id"] == guardarecurso_user.id


@pytest.mark.asyncio
async def test_crear_equipo_codigo_duplicado(client: AsyncClient, auth_token_coordinador: str, equipo_asignado: Equipo):
    datos = {"nombre": "Otro GPS", "codigo": equipo_asignado.codigo}
    response = await client.post(f"{URL_EQUIPOS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Ya existe un equipo con este código de inventario"


@pytest.mark.asyncio
async def test_crear_equipo_asignado_a_no_guardarecurso(
    client: AsyncClient, auth_token_coordinador: str, coordinador_user: Usuario
):
    datos = {"nombre": "Cámara trampa", "codigo": "CAM-001", "usuario_id": coordinador_user.id}
    response = await client.post(f"{URL_EQUIPOS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_reparacion_desasigna_y_bloquea_asignacion(
    client: AsyncClient,
    db: Session,
    auth_token_coordinador: str,
    equipo_asignado: Equipo,
    guardarecurso_user: Usuario,
):
    headers = _h(auth_token_coordinador)
    response = await client.patch(
        f"{URL_EQUIPOS}/{equipo_asignado.id}/estado", json={"estado": "En Reparación"}, headers=headers
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["estado"] == "En Reparación"
    assert response.json()["usuario_id"] is None

    response = await client.put(
        f"{URL_EQUIPOS}/{equipo_asignado.id}", json={"usuario_id": guardarecurso_user.id}, headers=headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "No se puede asignar un equipo que está en reparación"

    # Las observaciones sí se pueden editar
    response = await client.put(
        f"{URL_EQUIPOS}/{equipo_asignado.id}", json={"observaciones": "Pantalla dañada"}, headers=headers
    )
    assert response.status_code == status.HTTP_200_OK
    db.refresh(equipo_asignado)
    assert equipo_asignado.observaciones == "Pantalla dañada"
    assert equipo_asignado.usuario_id is None


@pytest.mark.asyncio
async def test_guardarecurso_solo_ve_su_equipo(
    client: AsyncClient,
    db: Session,
    equipo_asignado: Equipo,
    otro_guardarecurso_user: Usuario,
    auth_token_guardarecurso: str,
    auth_token_otro_guardarecurso: str,
    auth_token_coordinador: str,
):
    equipo_service.create(db, obj_in=EquipoCreate(nombre="Binoculares", codigo="BIN-001", usuario_id=otro_guardarecurso_user.id))
    equipo_service.create(db, obj_in=EquipoCreate(nombre="Machete", codigo="MAC-001"))
    db.commit()

    response = await client.get(f"{URL_EQUIPOS}/", headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_200_OK
    assert [e["codigo"] for e in response.json()] == ["GPS-001"]

    response = await client.get(f"{URL_EQUIPOS}/", headers=_h(auth_token_otro_guardarecurso))
    assert [e["codigo"] for e in response.json()] == ["BIN-001"]

    response = await client.get(f"{URL_EQUIPOS}/", headers=_h(auth_token_coordinador))
    assert {e["codigo"] for e in response.json()} == {"GPS-001", "BIN-001", "MAC-001"}

    response = await client.get(
        f"{URL_EQUIPOS}/", params={"usuario_id": otro_guardarecurso_user.id}, headers=_h(auth_token_coordinador)
    )
    assert [e["codigo"] for e in response.json()] == ["BIN-001"]

    response = await client.patch(
        f"{URL_EQUIPOS}/{equipo_asignado.id}/estado", json={"estado": "Desactivado"}, headers=_h(auth_token_guardarecurso)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
