import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from guardarecursos.core.config import settings
from guardarecursos.models.area import Area
from guardarecursos.models.seguimiento import Seguimiento
from guardarecursos.models.usuario import Usuario

URL_HALLAZGOS = f"{settings.API_V1_STR}/hallazgos"
URL_INCIDENTES = f"{settings.API_V1_STR}/incidentes"


def _h(token: str) -> dict:
    assert token, "No se pudo obtener el token de autenticación."
    return {"Authorization": f"Bearer {token}"}


def _contar_seguimientos(db: Session) -> int:
    return db.execute(select(func.count(Seguimiento.id))).scalar_one()


# ==============================================================================
# Hallazgos
# ==============================================================================

@pytest.mark.asyncio
async def test_crear_y_consultar_hallazgo(client: AsyncClient, auth_token_coordinador: str, coordinador_user: Usuario):
    datos = {
        "titulo": "Extracción de madera",
        "descripcion": "Troncos apilados junto al río",
        "prioridad": "Crítica",
        "coordenadas": {"lat": 15.91, "lng": -90.66},
    }
    response = await client.post(f"{URL_HALLAZGOS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["estado"] == "Reportado"
    assert body["usuario"]["id"] == coordinador_user.id
    assert body["latitud"] == 15.91
    assert body["actividad_id"] is None

    response = await client.get(f"{URL_HALLAZGOS}/{body['id']}", headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["seguimientos"] == []


@pytest.mark.asyncio
async def test_crear_hallazgo_sin_coordenadas(client: AsyncClient, auth_token_coordinador: str):
    datos = {"titulo": "Incompleto", "descripcion": "Falta ubicación", "prioridad": "Baja"}
    response = await client.post(f"{URL_HALLAZGOS}/", json=datos, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["field"] == "coordenadas"


@pytest.mark.asyncio
async def test_filtrar_y_cambiar_estado_hallazgo(client: AsyncClient, auth_token_admin: str):
    headers = _h(auth_token_admin)
    ids = []
    for titulo, prioridad in (("Basura", "Baja"), ("Incendio", "Alta")):
        response = await client.post(
            f"{URL_HALLAZGOS}/",
            json={"titulo": titulo, "descripcion": titulo, "prioridad": prioridad, "coordenadas": {"lat": 15.0, "lng": -90.0}},
            headers=headers,
        )
        ids.append(response.json()["id"])

    response = await client.get(f"{URL_HALLAZGOS}/", params={"prioridad": "Alta"}, headers=headers)
    assert [h["id"] for h in response.json()] == [ids[1]]

    response = await client.patch(f"{URL_HALLAZGOS}/{ids[1]}/estado", json={"estado": "En Investigación"}, headers=headers)
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["estado"] == "En Investigación"

    response = await client.get(f"{URL_HALLAZGOS}/", params={"estado": "Reportado"}, headers=headers)
    assert [h["id"] for h in response.json()] == [ids[0]]

    response = await client.patch(f"{URL_HALLAZGOS}/{ids[0]}/estado", json={"estado": "Archivado"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_seguimiento_de_hallazgo(
    client: AsyncClient, db: Session, auth_token_coordinador: str, auth_token_admin: str, coordinador_user: Usuario
):
    response = await client.post(
        f"{URL_HALLAZGOS}/",
        json={"titulo": "Cacería", "descripcion": "Casquillos", "coordenadas": {"lat": 15.5, "lng": -90.5}},
        headers=_h(auth_token_coordinador),
    )
    hallazgo_id = response.json()["id"]
    assert response.json()["prioridad"] == "Media"

    for accion in ("Denuncia presentada", "Visita de verificación"):
        response = await client.post(
            f"{URL_HALLAZGOS}/{hallazgo_id}/seguimiento",
            json={"accion": accion, "observaciones": "Registrado por coordinación"},
            headers=_h(auth_token_coordinador),
        )
        assert response.status_code == status.HTTP_201_CREATED, response.text
        assert response.json()["usuario"]["id"] == coordinador_user.id

    response = await client.get(f"{URL_HALLAZGOS}/{hallazgo_id}", headers=_h(auth_token_coordinador))
    assert [s["accion"] for s in response.json()["seguimientos"]] == ["Denuncia presentada", "Visita de verificación"]

    response = await client.post(
        f"{URL_HALLAZGOS}/9999/seguimiento", json={"accion": "X", "observaciones": "Y"}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND

    # Eliminar el hallazgo elimina su seguimiento
    response = await client.delete(f"{URL_HALLAZGOS}/{hallazgo_id}", headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_200_OK, response.text
    assert _contar_seguimientos(db) == 0


# ==============================================================================
# Incidentes
# ==============================================================================

@pytest.mark.asyncio
async def test_guardarecurso_reporta_incidente(
    client: AsyncClient, auth_token_guardarecurso: str, guardarecurso_user: Usuario, area_protegida: Area
):
    datos = {"titulo": "Visitante extraviado", "descripcion": "Turista sin guía en el sendero"}
    response = await client.post(f"{URL_INCIDENTES}/", json=datos, headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    body = response.json()
    assert body["gravedad"] == "Leve"
    assert body["estado"] == "Reportado"
    assert body["area_id"] == area_protegida.id
    assert body["usuario"]["id"] == guardarecurso_user.id


@pytest.mark.asyncio
async def test_incidente_area_inexistente(client: AsyncClient, auth_token_guardarecurso: str):
    datos = {"titulo": "Área equivocada", "descripcion": "X", "gravedad": "Grave", "area_id": 9999}
    response = await client.post(f"{URL_INCIDENTES}/", json=datos, headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_guardarecurso_solo_ve_sus_incidentes(
    client: AsyncClient,
    auth_token_guardarecurso: str,
    auth_token_otro_guardarecurso: str,
    auth_token_coordinador: str,
):
    propio = await client.post(
        f"{URL_INCIDENTES}/", json={"titulo": "Fogata", "descripcion": "Fogata no autorizada"}, headers=_h(auth_token_guardarecurso)
    )
    ajeno = await client.post(
        f"{URL_INCIDENTES}/",
        json={"titulo": "Basura", "descripcion": "Desechos en el mirador", "gravedad": "Moderado"},
        headers=_h(auth_token_otro_guardarecurso),
    )
    propio_id, ajeno_id = propio.json()["id"], ajeno.json()["id"]

    response = await client.get(f"{URL_INCIDENTES}/", headers=_h(auth_token_guardarecurso))
    assert [i["id"] for i in response.json()] == [propio_id]

    response = await client.get(f"{URL_INCIDENTES}/{ajeno_id}", headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = await client.get(f"{URL_INCIDENTES}/", headers=_h(auth_token_coordinador))
    assert {i["id"] for i in response.json()} == {propio_id, ajeno_id}

    response = await client.get(f"{URL_INCIDENTES}/", params={"gravedad": "Moderado"}, headers=_h(auth_token_coordinador))
    assert [i["id"] for i in response.json()] == [ajeno_id]


@pytest.mark.asyncio
async def test_gestion_de_incidente(
    client: AsyncClient, db: Session, auth_token_guardarecurso: str, auth_token_coordinador: str, auth_token_admin: str
):
    response = await client.post(
        f"{URL_INCIDENTES}/",
        json={"titulo": "Accidente", "descripcion": "Visitante con esguince", "gravedad": "Grave"},
        headers=_h(auth_token_guardarecurso),
    )
    incidente_id = response.json()["id"]

    # El guardarecurso no cambia estados ni agrega seguimiento
    response = await client.patch(
        f"{URL_INCIDENTES}/{incidente_id}/estado", json={"estado": "Resuelto"}, headers=_h(auth_token_guardarecurso)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    response = await client.post(
        f"{URL_INCIDENTES}/{incidente_id}/seguimiento",
        json={"accion": "Atención", "observaciones": "Primeros auxilios"},
        headers=_h(auth_token_guardarecurso),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.patch(
        f"{URL_INCIDENTES}/{incidente_id}/estado", json={"estado": "En Atención"}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["estado"] == "En Atención"

    response = await client.post(
        f"{URL_INCIDENTES}/{incidente_id}/seguimiento",
        json={"accion": "Traslado", "observaciones": "Trasladado al centro de salud"},
        headers=_h(auth_token_coordinador),
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text

    response = await client.get(f"{URL_INCIDENTES}/{incidente_id}", headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_200_OK
    assert [s["accion"] for s in response.json()["seguimientos"]] == ["Traslado"]

    response = await client.delete(f"{URL_INCIDENTES}/{incidente_id}", headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["msg"] == "Incidente eliminado correctamente."
    assert _contar_seguimientos(db) == 0

    response = await client.get(f"{URL_INCIDENTES}/{incidente_id}", headers=_h(auth_token_admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND
