import csv
import io
from datetime import timedelta
from unittest import mock

import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guardarecursos.core.config import settings
from guardarecursos.core.tiempo import hoy
from guardarecursos.models.actividad import Actividad
from guardarecursos.models.usuario import Usuario
from guardarecursos.services.actividad import actividad_service

URL = f"{settings.API_V1_STR}/actividades"
PATRULLAJE = "Patrullaje de Control y Vigilancia"


def _h(token: str) -> dict:
    assert token, "No se pudo obtener el token de autenticación."
    return {"Authorization": f"Bearer {token}"}


def _total_actividades(db: Session) -> int:
    return db.execute(select(func.count(Actividad.id))).scalar_one()


# ==============================================================================
# Carga masiva JSON
# ==============================================================================

@pytest.mark.asyncio
async def test_carga_masiva_parcial(
    client: AsyncClient, db: Session, auth_token_coordinador: str, guardarecurso_user: Usuario, coordinador_user: Usuario
):
    """Los elementos inválidos se reportan sin impedir la carga de los válidos."""
    fecha = (hoy() + timedelta(days=2)).isoformat()
    actividades = [
        {"codigo": "M-001", "tipo": PATRULLAJE, "descripcion": "Ruta norte", "fecha": fecha, "guardarecurso_id": guardarecurso_user.id},
        {"codigo": "M-002", "tipo": PATRULLAJE, "descripcion": "Fecha rota", "fecha": "no-es-fecha", "guardarecurso_id": guardarecurso_user.id},
        {"tipo": "Tipo Inventado", "descripcion": "Sin código", "fecha": fecha, "guardarecurso_id": guardarecurso_user.id},
        {"codigo": "M-004", "tipo": PATRULLAJE, "descripcion": "Mal asignada", "fecha": fecha, "guardarecurso_id": coordinador_user.id},
        {"codigo": "M-005", "tipo": "1", "descripcion": "Tipo por ID", "fecha": fecha, "hora_inicio": "09:15", "guardarecurso_id": guardarecurso_user.id},
    ]
    response = await client.post(f"{URL}/bulk", json={"actividades": actividades}, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()

    assert body["cargadas"] == 2
    assert body["con_error"] == 3
    assert [a["codigo"] for a in body["actividades"]] == ["M-001", "M-005"]
    assert all(a["estado"] == "Programada" for a in body["actividades"])

    errores = {e["indice"]: e for e in body["errores"]}
    assert set(errores) == {1, 2, 3}
    assert errores[1]["codigo"] == "M-002"
    assert errores[1]["error"].startswith("fecha:")
    assert errores[2]["codigo"] == "Actividad 3"
    assert errores[2]["error"] == "Tipo de actividad 'Tipo Inventado' no encontrado"
    assert errores[3]["codigo"] == "M-004"

    assert _total_actividades(db) == 2


@pytest.mark.asyncio
async def test_carga_masiva_codigo_no_textual(
    client: AsyncClient, db: Session, auth_token_coordinador: str, guardarecurso_user: Usuario
):
    fecha = (hoy() + timedelta(days=1)).isoformat()
    actividades = [
        {"codigo": "N-001", "tipo": PATRULLAJE, "descripcion": "Válida", "fecha": fecha, "guardarecurso_id": guardarecurso_user.id},
        {"codigo": 7, "tipo": PATRULLAJE, "descripcion": "Código numérico", "fecha": fecha, "guardarecurso_id": guardarecurso_user.id},
    ]
    response = await client.post(f"{URL}/bulk", json={"actividades": actividades}, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()
    assert body["cargadas"] == 1
    assert body["errores"][0]["indice"] == 1
    assert body["errores"][0]["codigo"] == "7"
    assert body["errores"][0]["error"].startswith("codigo:")
    assert _total_actividades(db) == 1


@pytest.mark.asyncio
async def test_carga_masiva_lista_vacia(client: AsyncClient, auth_token_coordinador: str):
    response = await client.post(f"{URL}/bulk", json={"actividades": []}, headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_carga_masiva_requiere_planificacion(
    client: AsyncClient, auth_token_guardarecurso: str, guardarecurso_user: Usuario
):
    actividades = [{"tipo": PATRULLAJE, "descripcion": "X", "fecha": hoy().isoformat(), "guardarecurso_id": guardarecurso_user.id}]
    response = await client.post(f"{URL}/bulk", json={"actividades": actividades}, headers=_h(auth_token_guardarecurso))
    assert response.status_code == status.HTTP_403_FORBIDDEN


# ==============================================================================
# Carga masiva CSV
# ==============================================================================

CSV_MIXTO = (
    "# Actividades de noviembre\n"
    "codigo,tipo,descripcion,fecha,hora_inicio\n"
    f"C-001,{PATRULLAJE},Recorrido matutino,2026-11-15,06:30\n"
    "C-002,1,,15/11/2026,\n"
    ",1,Sin código,2026-11-15,08:00\n"
    "C-004,Tipo Inexistente,Tipo malo,2026-11-15,08:00\n"
    "C-005,1,Fecha mala,2026-13-40,08:00\n"
    "C-006,1,Hora mala,2026-11-15,8h\n"
    ",,,,\n"
    "\n"
    "# = fin =\n"
)


@pytest.mark.asyncio
async def test_carga_csv_con_errores_por_linea(
    client: AsyncClient, db: Session, auth_token_coordinador: str, guardarecurso_user: Usuario
):
    archivo = {"archivo": ("actividades.csv", CSV_MIXTO.encode("utf-8"), "text/csv")}
    response = await client.post(
        f"{URL}/bulk-csv", files=archivo, data={"guardarecurso_id": str(guardarecurso_user.id)}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()

    assert body["cargadas"] == 2
    assert body["con_error"] == 4
    creadas = {a["codigo"]: a for a in body["actividades"]}
    assert set(creadas) == {"C-001", "C-002"}
    assert creadas["C-002"]["descripcion"] == PATRULLAJE
    assert creadas["C-002"]["fecha_programada"].startswith("2026-11-15T08:00")
    assert all(a["guardarecurso"]["id"] == guardarecurso_user.id for a in body["actividades"])

    errores = [e["error"] for e in body["errores"]]
    assert errores[0] == "Línea 4: Falta código"
    assert errores[1] == "Línea 5 (C-004): Tipo de actividad 'Tipo Inexistente' no encontrado"
    assert errores[2].startswith("Línea 6 (C-005): Fecha inválida")
    assert errores[3].startswith("Línea 7 (C-006): Hora inválida")

    assert _total_actividades(db) == 2


@pytest.mark.asyncio
async def test_carga_csv_codigo_demasiado_largo(
    client: AsyncClient, db: Session, auth_token_coordinador: str, guardarecurso_user: Usuario
):
    contenido = (
        "codigo,tipo,descripcion,fecha,hora_inicio\n"
        f"{'L' * 51},1,Código largo,2026-11-15,08:00\n"
        f"{'L' * 50},1,Código al límite,2026-11-15,08:00\n"
    )
    archivo = {"archivo": ("largo.csv", contenido.encode("utf-8"), "text/csv")}
    response = await client.post(
        f"{URL}/bulk-csv", files=archivo, data={"guardarecurso_id": str(guardarecurso_user.id)}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()
    assert body["cargadas"] == 1
    assert [e["error"] for e in body["errores"]] == ["Línea 2: El código excede 50 caracteres"]
    assert _total_actividades(db) == 1


@pytest.mark.asyncio
async def test_carga_csv_error_de_base_de_datos_por_linea(
    client: AsyncClient, db: Session, auth_token_coordinador: str, guardarecurso_user: Usuario
):
    """Un error de base de datos en una línea se reporta sin descartar el resto del archivo."""
    contenido = (
        "codigo,tipo,descripcion,fecha,hora_inicio\n"
        "D-001,1,Primera,2026-11-15,08:00\n"
        "D-002,1,Falla al insertar,2026-11-15,09:00\n"
        "D-003,1,Tercera,2026-11-15,10:00\n"
    )
    original = actividad_service._construir

    def _construir_con_fallo(*args, **kwargs):
        if kwargs.get("codigo") == "D-002":
            raise SQLAlchemyError("valor demasiado largo para el tipo character varying(50)")
        return original(*args, **kwargs)

    archivo = {"archivo": ("actividades.csv", contenido.encode("utf-8"), "text/csv")}
    with mock.patch.object(actividad_service, "_construir", side_effect=_construir_con_fallo):
        response = await client.post(
            f"{URL}/bulk-csv", files=archivo, data={"guardarecurso_id": str(guardarecurso_user.id)}, headers=_h(auth_token_coordinador)
        )
    assert response.status_code == status.HTTP_200_OK, response.text
    body = response.json()
    assert [a["codigo"] for a in body["actividades"]] == ["D-001", "D-003"]
    assert body["errores"] == [
        {"indice": 3, "codigo": "D-002", "error": "Línea 3 (D-002): No se pudo registrar la actividad."}
    ]
    assert _total_actividades(db) == 2


@pytest.mark.asyncio
async def test_carga_csv_encabezados_faltantes(
    client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario
):
    contenido = "codigo,descripcion\nC-001,Sin tipo ni fecha\n"
    archivo = {"archivo": ("malo.csv", contenido.encode("utf-8"), "text/csv")}
    response = await client.post(
        f"{URL}/bulk-csv", files=archivo, data={"guardarecurso_id": str(guardarecurso_user.id)}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Encabezados faltantes en el CSV: tipo, fecha"


@pytest.mark.asyncio
async def test_carga_csv_guardarecurso_invalido(
    client: AsyncClient, auth_token_coordinador: str, coordinador_user: Usuario
):
    archivo = {"archivo": ("actividades.csv", CSV_MIXTO.encode("utf-8"), "text/csv")}
    response = await client.post(
        f"{URL}/bulk-csv", files=archivo, data={"guardarecurso_id": str(coordinador_user.id)}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_carga_csv_codificacion_invalida(
    client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario
):
    contenido = "codigo,tipo,descripcion,fecha\nC-001,1,Reforestación,2026-11-15\n".encode("utf-16")
    archivo = {"archivo": ("utf16.csv", contenido, "text/csv")}
    response = await client.post(
        f"{URL}/bulk-csv", files=archivo, data={"guardarecurso_id": str(guardarecurso_user.id)}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "El archivo debe estar codificado en UTF-8."


@pytest.mark.asyncio
async def test_plantilla_csv(client: AsyncClient, auth_token_coordinador: str, guardarecurso_user: Usuario):
    response = await client.get(f"{URL}/plantilla-csv", headers=_h(auth_token_coordinador))
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.headers["content-type"].startswith("text/csv")
    assert "plantilla_actividades.csv" in response.headers["content-disposition"]

    texto = response.text
    filas = list(csv.reader(io.StringIO(texto)))
    assert filas[0] == ["codigo", "tipo", "descripcion", "fecha", "hora_inicio"]
    assert filas[1][0] == "ACT-001"
    assert f"# 1 = {PATRULLAJE}" in texto

    # La plantilla descargada se puede cargar tal cual
    archivo = {"archivo": ("plantilla.csv", texto.encode("utf-8"), "text/csv")}
    response = await client.post(
        f"{URL}/bulk-csv", files=archivo, data={"guardarecurso_id": str(guardarecurso_user.id)}, headers=_h(auth_token_coordinador)
    )
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["cargadas"] == 2
    assert response.json()["con_error"] == 0
