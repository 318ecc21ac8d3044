import logging
from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query, Response, UploadFile, File, Form
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from guardarecursos.api import deps
from guardarecursos.core import permissions as perms
from guardarecursos.schemas import (
    Actividad, ActividadCreate, ActividadUpdate, ActividadDetalle,
    IniciarActividad, FinalizarActividad, Punto, PuntoCreate,
    CargaMasiva, ResultadoCargaMasiva, Hallazgo, HallazgoEnActividad, Msg,
)
from guardarecursos.schemas.enums import EstadoActividadEnum
from guardarecursos.services.actividad import actividad_service
from guardarecursos.services.usuario import usuario_service
from guardarecursos.models import Usuario as UsuarioModel

logger = logging.getLogger(__name__)
router = APIRouter()


# ==============================================================================
# Planificación: plantilla y cargas masivas
# (rutas estáticas antes de /{actividad_id})
# ==============================================================================

@router.get(
    "/plantilla-csv",
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_PLANIFICACION, perms.ACCION_CREAR))],
    summary="Descargar la plantilla CSV de carga masiva",
    response_class=Response,
)
def descargar_plantilla_csv(db: Session = Depends(deps.get_db)) -> Response:
    contenido = actividad_service.plantilla_csv(db)
    return Response(
        content=contenido,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="plantilla_actividades.csv"'},
    )


@router.post(
    "/bulk",
    response_model=ResultadoCargaMasiva,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_PLANIFICACION, perms.ACCION_CREAR))],
    summary="Carga masiva de actividades (JSON)",
)
def carga_masiva(
    *,
    db: Session = Depends(deps.get_db),
    carga_in: CargaMasiva,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Crea cada actividad de la lista de forma independiente. Las que fallan
    se reportan en `errores` sin impedir la carga del resto.
    """
    logger.info(f"Usuario '{current_user.email}' inicia carga masiva de {len(carga_in.actividades)} actividad(es).")
    try:
        resultado = actividad_service.carga_masiva(db, items=carga_in.actividades)
        db.commit()
        for actividad in resultado["actividades"]:
            db.refresh(actividad)
        return resultado
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado en la carga masiva de actividades: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor en la carga masiva.")


@router.post(
    "/bulk-csv",
    response_model=ResultadoCargaMasiva,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_PLANIFICACION, perms.ACCION_CREAR))],
    summary="Carga masiva de actividades desde un archivo CSV",
)
async def carga_masiva_csv(
    *,
    db: Session = Depends(deps.get_db),
    archivo: UploadFile = File(..., description="CSV con columnas codigo,tipo,descripcion,fecha,hora_inicio"),
    guardarecurso_id: int = Form(..., description="Guardarecurso al que se asignan todas las actividades"),
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    crudo = await archivo.read()
    try:
        contenido = crudo.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning(f"Archivo CSV '{archivo.filename}' con codificación no soportada.")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El archivo debe estar codificado en UTF-8.")

    logger.info(f"Usuario '{current_user.email}' carga el CSV '{archivo.filename}' para el guardarecurso ID {guardarecurso_id}.")
    try:
        resultado = actividad_service.carga_masiva_csv(db, contenido=contenido, guardarecurso_id=guardarecurso_id)
        db.commit()
        for actividad in resultado["actividades"]:
            db.refresh(actividad)
        return resultado
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado procesando el CSV '{archivo.filename}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al procesar el CSV.")


# ==============================================================================
# Consultas
# ==============================================================================

@router.get(
    "/patrullajes-en-progreso",
    response_model=List[ActividadDetalle],
    summary="Patrullajes en progreso del usuario actual",
)
def read_patrullajes_en_progreso(
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_VER)),
) -> Any:
    return actividad_service.patrullajes_en_progreso(db, usuario=current_user)


@router.get(
    "/",
    response_model=List[Actividad],
    summary="Listar actividades",
)
def read_actividades(
    db: Session = Depends(deps.get_db),
    estado: Optional[EstadoActividadEnum] = Query(None),
    guardarecurso_id: Optional[int] = Query(None, description="Filtrar por guardarecurso asignado"),
    tipo_id: Optional[int] = Query(None, description="Filtrar por tipo de actividad"),
    fecha_desde: Optional[date] = Query(None),
    fecha_hasta: Optional[date] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(500, ge=1, le=1000),
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_VER)),
) -> Any:
    """
    Lista las actividades por fecha programada descendente.
    Un guardarecurso solo ve las actividades que tiene asignadas.
    """
    if usuario_service.es_guardarecurso(current_user):
        guardarecurso_id = current_user.id
    return actividad_service.listar(
        db,
        usuario_id=guardarecurso_id,
        estado=estado,
        tipo_id=tipo_id,
        fecha_desde=fecha_desde,
        fecha_hasta=fecha_hasta,
        skip=skip,
        limit=limit,
    )


def _get_actividad_visible(db: Session, actividad_id: int, current_user: UsuarioModel):
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    if usuario_service.es_guardarecurso(current_user) and actividad.usuario_id != current_user.id:
        # Para el guardarecurso, las actividades ajenas no existen
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Actividad con ID {actividad_id} no encontrado.")
    return actividad


@router.get(
    "/{actividad_id}",
    response_model=ActividadDetalle,
    summary="Obtener una actividad con su ruta, hallazgos y evidencias",
)
def read_actividad(
    actividad_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_VER)),
) -> Any:
    return _get_actividad_visible(db, actividad_id, current_user)


# ==============================================================================
# Planificación: CRUD
# ==============================================================================

@router.post(
    "/",
    response_model=Actividad,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_PLANIFICACION, perms.ACCION_CREAR))],
    summary="Programar una actividad",
)
def create_actividad(
    *,
    db: Session = Depends(deps.get_db),
    actividad_in: ActividadCreate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """
    Crea una actividad en estado Programada para un guardarecurso activo.
    """
    logger.info(f"Usuario '{current_user.email}' programando actividad '{actividad_in.tipo}' para el usuario ID {actividad_in.guardarecurso_id}.")
    try:
        actividad = actividad_service.create(db, obj_in=actividad_in)
        db.commit()
        db.refresh(actividad)
        return actividad
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al programar actividad: {http_exc.detail}")
        raise http_exc
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado programando actividad: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al crear la actividad.")


@router.put(
    "/{actividad_id}",
    response_model=Actividad,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_PLANIFICACION, perms.ACCION_EDITAR))],
    summary="Editar una actividad programada",
)
def update_actividad(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    actividad_in: ActividadUpdate,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        actividad = actividad_service.update(db, db_obj=actividad, obj_in=actividad_in)
        db.commit()
        db.refresh(actividad)
        logger.info(f"Actividad ID {actividad_id} actualizada por '{current_user.email}'.")
        return actividad
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando actividad ID {actividad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al actualizar la actividad.")


@router.post(
    "/{actividad_id}/cancelar",
    response_model=Actividad,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_PLANIFICACION, perms.ACCION_EDITAR))],
    summary="Cancelar una actividad programada",
)
def cancelar_actividad(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        actividad = actividad_service.cancelar(db, db_obj=actividad)
        db.commit()
        db.refresh(actividad)
        logger.info(f"Actividad ID {actividad_id} cancelada por '{current_user.email}'.")
        return actividad
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cancelando actividad ID {actividad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al cancelar la actividad.")


@router.delete(
    "/{actividad_id}",
    response_model=Msg,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_PLANIFICACION, perms.ACCION_ELIMINAR))],
    summary="Eliminar una actividad",
)
def delete_actividad(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    """Elimina la actividad junto con sus puntos GPS, hallazgos y evidencias."""
    try:
        actividad_service.remove(db, id=actividad_id)
        db.commit()
        logger.info(f"Actividad ID {actividad_id} eliminada por '{current_user.email}'.")
        return {"msg": "Actividad eliminada correctamente."}
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando actividad ID {actividad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al eliminar la actividad.")


# ==============================================================================
# Registro diario: ejecución en campo
# ==============================================================================

@router.put(
    "/{actividad_id}/iniciar",
    response_model=Actividad,
    summary="Iniciar una actividad",
)
def iniciar_actividad(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    datos_in: Optional[IniciarActividad] = None,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_EDITAR)),
) -> Any:
    """
    Programada -> En Progreso. Solo el guardarecurso asignado, y solo si no
    tiene otra actividad en progreso.
    """
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        actividad = actividad_service.iniciar(
            db, db_obj=actividad, usuario=current_user, datos=datos_in or IniciarActividad()
        )
        db.commit()
        db.refresh(actividad)
        return actividad
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado iniciando actividad ID {actividad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al iniciar la actividad.")


@router.put(
    "/{actividad_id}/finalizar",
    response_model=ActividadDetalle,
    summary="Finalizar una actividad con sus hallazgos y evidencias",
)
def finalizar_actividad(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    datos_in: FinalizarActividad,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_EDITAR)),
) -> Any:
    """
    En Progreso -> Completada. El cambio de estado, los hallazgos y las
    evidencias se confirman en un único commit.
    """
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        actividad = actividad_service.finalizar(db, db_obj=actividad, usuario=current_user, datos=datos_in)
        db.commit()
        db.refresh(actividad)
        return actividad
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado finalizando actividad ID {actividad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al finalizar la actividad.")


@router.post(
    "/{actividad_id}/coordenadas",
    response_model=Punto,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar un punto GPS de la ruta",
)
def agregar_punto(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    punto_in: PuntoCreate,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_CREAR)),
) -> Any:
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        punto = actividad_service.agregar_punto(db, db_obj=actividad, usuario=current_user, obj_in=punto_in)
        db.commit()
        db.refresh(punto)
        return punto
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado registrando punto GPS en la actividad ID {actividad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al registrar el punto GPS.")


@router.delete(
    "/{actividad_id}/coordenadas/{punto_id}",
    response_model=Msg,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_ELIMINAR))],
    summary="Eliminar un punto GPS",
)
def eliminar_punto(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    punto_id: int,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        actividad_service.eliminar_punto(db, db_obj=actividad, punto_id=punto_id)
        db.commit()
        logger.info(f"Punto GPS ID {punto_id} eliminado por '{current_user.email}'.")
        return {"msg": "Punto GPS eliminado correctamente."}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando punto GPS ID {punto_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al eliminar el punto GPS.")


@router.post(
    "/{actividad_id}/hallazgos",
    response_model=Hallazgo,
    status_code=status.HTTP_201_CREATED,
    summary="Reportar un hallazgo durante la actividad",
)
def agregar_hallazgo(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    hallazgo_in: HallazgoEnActividad,
    current_user: UsuarioModel = Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_CREAR)),
) -> Any:
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        hallazgo = actividad_service.agregar_hallazgo(db, db_obj=actividad, usuario=current_user, obj_in=hallazgo_in)
        db.commit()
        db.refresh(hallazgo)
        return hallazgo
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado registrando hallazgo en la actividad ID {actividad_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al registrar el hallazgo.")


@router.delete(
    "/{actividad_id}/hallazgos/{hallazgo_id}",
    response_model=Msg,
    dependencies=[Depends(deps.PermissionChecker(perms.MOD_REGISTRO_DIARIO, perms.ACCION_ELIMINAR))],
    summary="Eliminar un hallazgo de la actividad",
)
def eliminar_hallazgo(
    *,
    db: Session = Depends(deps.get_db),
    actividad_id: int,
    hallazgo_id: int,
    current_user: UsuarioModel = Depends(deps.get_current_active_user),
) -> Any:
    actividad = actividad_service.get_or_404(db, id=actividad_id)
    try:
        actividad_service.eliminar_hallazgo(db, db_obj=actividad, hallazgo_id=hallazgo_id)
        db.commit()
        logger.info(f"Hallazgo ID {hallazgo_id} de la actividad ID {actividad_id} eliminado por '{current_user.email}'.")
        return {"msg": "Hallazgo eliminado correctamente."}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado eliminando hallazgo ID {hallazgo_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor al eliminar el hallazgo.")
