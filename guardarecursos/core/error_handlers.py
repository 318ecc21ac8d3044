import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, NoResultFound
from psycopg import errors as psycopg_errors

logger = logging.getLogger(__name__)

# Mensajes por restricción única (nombres generados por la convención de db/base.py)
MENSAJES_UNICIDAD = {
    "uq_usuarios_email": "Ya existe un usuario con este correo electrónico.",
    "uq_usuarios_dpi": "Ya existe un usuario con este DPI.",
    "uq_areas_nombre": "Ya existe un área protegida con este nombre.",
    "uq_equipos_codigo": "Ya existe un equipo con este código de inventario.",
    "uq_roles_nombre": "Ya existe un rol con ese nombre.",
    "uq_departamentos_nombre": "Ya existe un departamento con ese nombre.",
    "uq_ecosistemas_nombre": "Ya existe un ecosistema con ese nombre.",
    "uq_tipos_actividad_nombre": "Ya existe un tipo de actividad con ese nombre.",
}


async def validation_exception_handler(request: Request, exc: Exception):
    """
    Manejador para errores de validación de Pydantic en las solicitudes.
    Responde 400 con el detalle por campo.
    """
    if not isinstance(exc, RequestValidationError):
        return await generic_exception_handler(request, exc)

    error_details = []
    for error in exc.errors():
        field_loc = list(error.get("loc", ["body"]))
        if field_loc and field_loc[0] in ("body", "query", "path", "header") and len(field_loc) > 1:
            field = " -> ".join(map(str, field_loc[1:]))
        else:
            field = " -> ".join(map(str, field_loc)) or "body"
        message = error.get("msg", "Error de validación")
        error_details.append({"field": field, "message": message})

    logger.warning(f"Error de Validación en Request: {request.method} {request.url} - Errores: {error_details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Error de validación en los datos de entrada.", "errors": error_details},
    )


async def http_exception_handler(request: Request, exc: Exception):
    """
    Manejador para excepciones HTTP explícitas lanzadas en la aplicación.
    """
    if not isinstance(exc, StarletteHTTPException):
        return await generic_exception_handler(request, exc)

    log_message = f"HTTPException - Status: {exc.status_code}, Detail: {exc.detail}, Request: {request.method} {request.url}"
    if exc.status_code >= 500:
        logger.error(log_message)
    elif exc.status_code >= 400:
        logger.warning(log_message)
    else:
        logger.info(log_message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _mensaje_unicidad(constraint_name, texto: str) -> str:
    if constraint_name:
        # Las columnas unique=True con index=True generan un índice único 'ix_...'
        clave = "uq_" + constraint_name[len("ix_"):] if constraint_name.startswith("ix_") else constraint_name
        if clave in MENSAJES_UNICIDAD:
            return MENSAJES_UNICIDAD[clave]
    # SQLite no expone el nombre de la restricción: "UNIQUE constraint failed: usuarios.email"
    for nombre, mensaje in MENSAJES_UNICIDAD.items():
        tabla_columna = nombre[len("uq_"):]
        tabla, _, columna = tabla_columna.rpartition("_")
        if f"{tabla}.{columna}" in texto:
            return mensaje
    return "Conflicto: ya existe un registro con datos que deben ser únicos."


async def database_exception_handler(request: Request, exc: Exception):
    """
    Manejador para errores de base de datos (SQLAlchemy y psycopg).
    Nunca devuelve al cliente el texto original del motor.
    """
    if not isinstance(exc, SQLAlchemyError):
        return await generic_exception_handler(request, exc)

    original_exc = getattr(exc, "orig", None)
    sqlstate = getattr(original_exc, "sqlstate", None)
    diag = getattr(original_exc, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag else None
    texto = str(original_exc if original_exc else exc)

    logger.error(
        f"Database Error Handler - Type: {type(original_exc).__name__ if original_exc else type(exc).__name__}, "
        f"SQLSTATE: {sqlstate}, Constraint: '{constraint_name}', Request: {request.method} {request.url}",
        exc_info=True,
    )

    texto_lower = texto.lower()
    if isinstance(original_exc, psycopg_errors.UniqueViolation) or "unique constraint" in texto_lower:
        user_message = _mensaje_unicidad(constraint_name, texto)
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(original_exc, psycopg_errors.ForeignKeyViolation) or "foreign key constraint" in texto_lower:
        user_message = "Error de referencia: el registro vinculado no existe o tiene registros dependientes."
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(original_exc, psycopg_errors.NotNullViolation) or "not null constraint" in texto_lower:
        column_name = getattr(diag, "column_name", None) if diag else None
        user_message = f"Error de datos: el campo '{column_name or 'desconocido'}' no puede ser nulo."
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(original_exc, psycopg_errors.CheckViolation) or "check constraint" in texto_lower:
        user_message = "Los datos proporcionados violan una regla de negocio."
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, IntegrityError):
        user_message = "Error de integridad en la base de datos. Verifique los datos."
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, NoResultFound):
        user_message = "El recurso solicitado no fue encontrado."
        status_code = status.HTTP_404_NOT_FOUND
    else:
        logger.error(f"DB Handler: Error DB no mapeado resultando en 500: {type(exc).__name__}")
        user_message = "Ocurrió un error interno del servidor al procesar la solicitud de base de datos."
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.info(f"DB Handler: Mapeando error DB a -> Status={status_code}, Detail='{user_message}'")
    return JSONResponse(status_code=status_code, content={"detail": user_message})


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Manejador genérico para cualquier excepción no capturada por otros manejadores.
    """
    logger.critical(
        f"Unhandled Python Exception: {type(exc).__name__} - {exc}, Request: {request.method} {request.url}\n"
        f"{traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Ocurrió un error interno inesperado en la aplicación."},
    )


def register_error_handlers(app: FastAPI):
    """Registra todos los manejadores de excepciones personalizados en la app FastAPI."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Manejadores de errores personalizados registrados.")
