import csv
import io
import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from fastapi import HTTPException, status
from pydantic import ValidationError

from guardarecursos.core.permissions import GUARDARECURSO_ROLE_NAME
from guardarecursos.core.tiempo import ahora, combinar_fecha_hora, hoy, rango_del_dia
from guardarecursos.models.actividad import Actividad
from guardarecursos.models.fotografia import Fotografia
from guardarecursos.models.geolocalizacion import Geolocalizacion
from guardarecursos.models.hallazgo import Hallazgo
from guardarecursos.models.tipo_actividad import TipoActividad
from guardarecursos.models.usuario import Usuario
from guardarecursos.schemas.actividad import (
    ActividadCreate,
    ActividadUpdate,
    FinalizarActividad,
    IniciarActividad,
    PuntoCreate,
)
from guardarecursos.schemas.enums import EstadoActividadEnum, EstadoUsuarioEnum
from guardarecursos.schemas.hallazgo import HallazgoEnActividad

from .base_service import BaseService
from .catalogo import tipo_actividad_service
from .hallazgo import hallazgo_service

logger = logging.getLogger(__name__)

PROGRAMADA = EstadoActividadEnum.PROGRAMADA.value
EN_PROGRESO = EstadoActividadEnum.EN_PROGRESO.value
COMPLETADA = EstadoActividadEnum.COMPLETADA.value
CANCELADA = EstadoActividadEnum.CANCELADA.value

CSV_COLUMNAS = ["codigo", "tipo", "descripcion", "fecha", "hora_inicio"]
CSV_FORMATOS_FECHA = ("%Y-%m-%d", "%d/%m/%Y")
CSV_HORA_POR_DEFECTO = time(8, 0)
CODIGO_MAX_LEN = 50


class ActividadService(BaseService[Actividad, ActividadCreate, ActividadUpdate]):
    """
    Servicio para la planificación y el registro diario de actividades de campo.

    Ciclo de vida: Programada -> En Progreso -> Completada, con Cancelada
    alcanzable solo desde Programada. Ningún método realiza commit; las
    transiciones validan todo antes de modificar la sesión, de modo que un
    error no deja cambios pendientes.
    """

    # ===============================================================
    # Consultas
    # ===============================================================
    def listar(
        self,
        db: Session,
        *,
        usuario_id: Optional[int] = None,
        estado: Optional[EstadoActividadEnum] = None,
        tipo_id: Optional[int] = None,
        fecha_desde: Optional[date] = None,
        fecha_hasta: Optional[date] = None,
        skip: int = 0,
        limit: int = 500,
    ) -> List[Actividad]:
        statement = select(self.model).order_by(self.model.fecha_programada.desc(), self.model.id.desc())
        if usuario_id is not None:
            statement = statement.where(self.model.usuario_id == usuario_id)
        if estado:
            statement = statement.where(self.model.estado == estado.value)
        if tipo_id is not None:
            statement = statement.where(self.model.tipo_id == tipo_id)
        if fecha_desde:
            statement = statement.where(self.model.fecha_programada >= rango_del_dia(fecha_desde)[0])
        if fecha_hasta:
            statement = statement.where(self.model.fecha_programada < rango_del_dia(fecha_hasta)[1])
        statement = statement.offset(skip).limit(limit)
        return list(db.execute(statement).scalars().unique().all())

    def contar_programadas_hoy(self, db: Session) -> int:
        inicio, fin = rango_del_dia(hoy())
        statement = select(func.count(self.model.id)).where(
            self.model.fecha_programada >= inicio,
            self.model.fecha_programada < fin,
        )
        return db.execute(statement).scalar_one_or_none() or 0

    def get_en_progreso(self, db: Session, *, usuario_id: int, excluir_id: Optional[int] = None) -> Optional[Actividad]:
        statement = select(self.model).where(self.model.usuario_id == usuario_id, self.model.estado == EN_PROGRESO)
        if excluir_id is not None:
            statement = statement.where(self.model.id != excluir_id)
        return db.execute(statement).scalars().first()

    def patrullajes_en_progreso(self, db: Session, *, usuario: Usuario) -> List[Actividad]:
        """Actividades de patrullaje En Progreso del usuario, con sus puntos GPS."""
        statement = (
            select(self.model)
            .join(TipoActividad, self.model.tipo_id == TipoActividad.id)
            .where(
                self.model.usuario_id == usuario.id,
                self.model.estado == EN_PROGRESO,
                func.lower(TipoActividad.nombre).like("%patrull%"),
            )
            .order_by(self.model.fecha_inicio)
        )
        return list(db.execute(statement).scalars().unique().all())

    def listar_rutas(
        self,
        db: Session,
        *,
        usuario_id: Optional[int] = None,
        fecha_desde: Optional[date] = None,
        fecha_hasta: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """
        Patrullajes completados con su recorrido GPS.
        Los filtros de fecha se aplican sobre la fecha de finalización.
        """
        statement = (
            select(self.model)
            .join(TipoActividad, self.model.tipo_id == TipoActividad.id)
            .where(self.model.estado == COMPLETADA, func.lower(TipoActividad.nombre).like("%patrull%"))
            .order_by(self.model.fecha_fin.desc(), self.model.id.desc())
        )
        if usuario_id is not None:
            statement = statement.where(self.model.usuario_id == usuario_id)
        if fecha_desde:
            statement = statement.where(self.model.fecha_fin >= rango_del_dia(fecha_desde)[0])
        if fecha_hasta:
            statement = statement.where(self.model.fecha_fin < rango_del_dia(fecha_hasta)[1])

        rutas = []
        for actividad in db.execute(statement).scalars().unique().all():
            rutas.append({
                "id": actividad.id,
                "codigo": actividad.codigo,
                "tipo": actividad.tipo.nombre,
                "descripcion": actividad.descripcion,
                "guardarecurso": actividad.guardarecurso,
                "fecha_programada": actividad.fecha_programada,
                "fecha_inicio": actividad.fecha_inicio,
                "fecha_fin": actividad.fecha_fin,
                "puntos": actividad.puntos,
                "tiene_gps": len(actividad.puntos) > 0,
            })
        return rutas

    # ===============================================================
    # Validaciones
    # ===============================================================
    def _resolver_tipo(self, db: Session, valor: str) -> TipoActividad:
        tipo = tipo_actividad_service.resolve(db, valor=valor)
        if not tipo:
            logger.warning(f"Tipo de actividad no reconocido: '{valor}'")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Tipo de actividad '{valor}' no encontrado",
            )
        return tipo

    def _validar_guardarecurso(self, db: Session, usuario_id: int) -> Usuario:
        usuario = db.get(Usuario, usuario_id)
        if not usuario:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Guardarecurso con ID {usuario_id} no encontrado.",
            )
        if not usuario.rol or usuario.rol.nombre != GUARDARECURSO_ROLE_NAME:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Las actividades solo pueden asignarse a usuarios con rol Guardarecurso.",
            )
        if usuario.estado != EstadoUsuarioEnum.ACTIVO.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"El guardarecurso está en estado '{usuario.estado}' y no puede recibir actividades.",
            )
        return usuario

    def _validar_estado(self, actividad: Actividad, requerido: str, accion: str) -> None:
        if actividad.estado != requerido:
            logger.warning(
                f"Transición inválida en actividad ID {actividad.id}: {accion} con estado '{actividad.estado}'."
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"No se puede {accion} una actividad en estado '{actividad.estado}'. Debe estar '{requerido}'.",
            )

    def _validar_asignado(self, actividad: Actividad, usuario: Usuario) -> None:
        """Solo el guardarecurso asignado opera su propia actividad en campo."""
        if actividad.usuario_id != usuario.id:
            logger.warning(f"Usuario '{usuario.email}' intentó operar la actividad ID {actividad.id} de otro guardarecurso.")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Solo el guardarecurso asignado puede realizar esta acción sobre la actividad.",
            )

    # ===============================================================
    # Planificación
    # ===============================================================
    def _construir(
        self,
        db: Session,
        *,
        tipo: TipoActividad,
        descripcion: str,
        fecha_programada: datetime,
        usuario_id: int,
        codigo: Optional[str] = None,
        latitud: Optional[float] = None,
        longitud: Optional[float] = None,
    ) -> Actividad:
        db_obj = self.model(
            codigo=codigo or None,
            tipo_id=tipo.id,
            descripcion=descripcion,
            fecha_programada=fecha_programada,
            latitud_inicio=latitud,
            longitud_inicio=longitud,
            estado=PROGRAMADA,
            usuario_id=usuario_id,
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def create(self, db: Session, *, obj_in: ActividadCreate) -> Actividad:
        """
        Crea una actividad en estado Programada.
        NO realiza db.commit().
        """
        tipo = self._resolver_tipo(db, obj_in.tipo)
        self._validar_guardarecurso(db, obj_in.guardarecurso_id)
        db_obj = self._construir(
            db,
            tipo=tipo,
            descripcion=obj_in.descripcion,
            fecha_programada=combinar_fecha_hora(obj_in.fecha, obj_in.hora_inicio),
            usuario_id=obj_in.guardarecurso_id,
            codigo=obj_in.codigo,
            latitud=obj_in.coordenadas.lat if obj_in.coordenadas else None,
            longitud=obj_in.coordenadas.lng if obj_in.coordenadas else None,
        )
        logger.info(f"Actividad '{tipo.nombre}' (ID {db_obj.id}) programada para el usuario ID {obj_in.guardarecurso_id}.")
        return db_obj

    def update(self, db: Session, *, db_obj: Actividad, obj_in: ActividadUpdate) -> Actividad:
        """
        Edición libre mientras la actividad está Programada.
        NO realiza db.commit().
        """
        self._validar_estado(db_obj, PROGRAMADA, "editar")
        datos = obj_in.model_dump(exclude_unset=True)
        update_data: Dict[str, Any] = {}

        if "codigo" in datos:
            update_data["codigo"] = datos["codigo"] or None
        if datos.get("tipo"):
            update_data["tipo_id"] = self._resolver_tipo(db, datos["tipo"]).id
        if datos.get("descripcion"):
            update_data["descripcion"] = datos["descripcion"]
        if datos.get("guardarecurso_id") is not None:
            self._validar_guardarecurso(db, datos["guardarecurso_id"])
            update_data["usuario_id"] = datos["guardarecurso_id"]
        if "coordenadas" in datos:
            coordenadas = obj_in.coordenadas
            update_data["latitud_inicio"] = coordenadas.lat if coordenadas else None
            update_data["longitud_inicio"] = coordenadas.lng if coordenadas else None
        if datos.get("fecha") or "hora_inicio" in datos:
            fecha = datos.get("fecha") or db_obj.fecha_programada.date()
            hora = datos["hora_inicio"] if "hora_inicio" in datos else db_obj.fecha_programada.time()
            update_data["fecha_programada"] = combinar_fecha_hora(fecha, hora)

        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def cancelar(self, db: Session, *, db_obj: Actividad) -> Actividad:
        self._validar_estado(db_obj, PROGRAMADA, "cancelar")
        logger.info(f"Actividad ID {db_obj.id} cancelada.")
        return super().update(db, db_obj=db_obj, obj_in={"estado": CANCELADA})

    # ===============================================================
    # Registro diario (ejecución en campo)
    # ===============================================================
    def iniciar(self, db: Session, *, db_obj: Actividad, usuario: Usuario, datos: IniciarActividad) -> Actividad:
        """
        Programada -> En Progreso. Requiere que el guardarecurso no tenga
        otra actividad en progreso.
        NO realiza db.commit().
        """
        self._validar_asignado(db_obj, usuario)
        self._validar_estado(db_obj, PROGRAMADA, "iniciar")
        otra = self.get_en_progreso(db, usuario_id=usuario.id, excluir_id=db_obj.id)
        if otra:
            logger.warning(f"Usuario '{usuario.email}' intentó iniciar la actividad ID {db_obj.id} con la ID {otra.id} en progreso.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Ya tiene una actividad en progreso (ID {otra.id}). Finalícela antes de iniciar otra.",
            )

        update_data: Dict[str, Any] = {"estado": EN_PROGRESO, "fecha_inicio": ahora()}
        if datos.coordenadas_inicio:
            update_data["latitud_inicio"] = datos.coordenadas_inicio.lat
            update_data["longitud_inicio"] = datos.coordenadas_inicio.lng
        logger.info(f"Actividad ID {db_obj.id} iniciada por '{usuario.email}'.")
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def agregar_punto(self, db: Session, *, db_obj: Actividad, usuario: Usuario, obj_in: PuntoCreate) -> Geolocalizacion:
        """Inserta un punto GPS con la hora del servidor. NO realiza db.commit()."""
        self._validar_asignado(db_obj, usuario)
        self._validar_estado(db_obj, EN_PROGRESO, "registrar puntos GPS en")
        punto = Geolocalizacion(
            actividad_id=db_obj.id,
            latitud=obj_in.latitud,
            longitud=obj_in.longitud,
            descripcion=obj_in.descripcion,
            fecha=ahora(),
        )
        db.add(punto)
        logger.debug(f"Punto GPS ({punto.latitud}, {punto.longitud}) preparado para la actividad ID {db_obj.id}.")
        return punto

    def eliminar_punto(self, db: Session, *, db_obj: Actividad, punto_id: int) -> Geolocalizacion:
        punto = db.get(Geolocalizacion, punto_id)
        if not punto or punto.actividad_id != db_obj.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Punto GPS con ID {punto_id} no encontrado en la actividad {db_obj.id}.",
            )
        db.delete(punto)
        logger.warning(f"Punto GPS ID {punto_id} de la actividad ID {db_obj.id} preparado para eliminación.")
        return punto

    def agregar_hallazgo(
        self, db: Session, *, db_obj: Actividad, usuario: Usuario, obj_in: HallazgoEnActividad
    ) -> Hallazgo:
        self._validar_asignado(db_obj, usuario)
        self._validar_estado(db_obj, EN_PROGRESO, "registrar hallazgos en")
        return hallazgo_service.crear_en_actividad(db, actividad_id=db_obj.id, obj_in=obj_in, usuario=usuario)

    def eliminar_hallazgo(self, db: Session, *, db_obj: Actividad, hallazgo_id: int) -> Hallazgo:
        hallazgo = db.get(Hallazgo, hallazgo_id)
        if not hallazgo or hallazgo.actividad_id != db_obj.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Hallazgo con ID {hallazgo_id} no encontrado en la actividad {db_obj.id}.",
            )
        db.delete(hallazgo)
        logger.warning(f"Hallazgo ID {hallazgo_id} de la actividad ID {db_obj.id} preparado para eliminación.")
        return hallazgo

    def finalizar(self, db: Session, *, db_obj: Actividad, usuario: Usuario, datos: FinalizarActividad) -> Actividad:
        """
        En Progreso -> Completada, adjuntando hallazgos y evidencias.
        El cambio de estado y los registros adjuntos quedan en la misma
        transacción: el llamador hace un único commit o rollback.
        NO realiza db.commit().
        """
        self._validar_asignado(db_obj, usuario)
        self._validar_estado(db_obj, EN_PROGRESO, "finalizar")

        momento = ahora()
        update_data: Dict[str, Any] = {"estado": COMPLETADA, "fecha_fin": momento}
        if datos.coordenadas_fin:
            update_data["latitud_fin"] = datos.coordenadas_fin.lat
            update_data["longitud_fin"] = datos.coordenadas_fin.lng
        if datos.observaciones is not None:
            update_data["observaciones"] = datos.observaciones
        super().update(db, db_obj=db_obj, obj_in=update_data)

        for hallazgo in datos.hallazgos:
            hallazgo_service.crear_en_actividad(db, actividad_id=db_obj.id, obj_in=hallazgo, usuario=usuario)
        for evidencia in datos.evidencias:
            db.add(Fotografia(**evidencia.model_dump(), actividad_id=db_obj.id, usuario_id=usuario.id, fecha=momento))

        logger.info(
            f"Actividad ID {db_obj.id} finalizada por '{usuario.email}' con "
            f"{len(datos.hallazgos)} hallazgo(s) y {len(datos.evidencias)} evidencia(s)."
        )
        return db_obj

    # ===============================================================
    # Carga masiva
    # ===============================================================
    def carga_masiva(self, db: Session, *, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Crea cada actividad de forma independiente: los errores de un
        elemento se acumulan y no impiden la carga de los demás.
        Cada elemento se inserta dentro de un SAVEPOINT.
        NO realiza db.commit().
        """
        creadas: List[Actividad] = []
        errores: List[Dict[str, Any]] = []
        for indice, item in enumerate(items):
            codigo = item.get("codigo") if isinstance(item, dict) else None
            codigo = str(codigo) if codigo not in (None, "") else f"Actividad {indice + 1}"
            try:
                obj_in = ActividadCreate.model_validate(item)
            except ValidationError as e:
                primero = e.errors()[0]
                campo = " -> ".join(str(p) for p in primero.get("loc", ())) or "actividad"
                errores.append({"indice": indice, "codigo": codigo, "error": f"{campo}: {primero.get('msg')}"})
                continue
            try:
                with db.begin_nested():
                    creadas.append(self.create(db, obj_in=obj_in))
            except HTTPException as e:
                errores.append({"indice": indice, "codigo": codigo, "error": e.detail})
            except SQLAlchemyError as e:
                logger.error(f"Error de base de datos al cargar la actividad en la posición {indice}: {e}", exc_info=True)
                errores.append({"indice": indice, "codigo": codigo, "error": "No se pudo registrar la actividad."})
        logger.info(f"Carga masiva: {len(creadas)} actividad(es) creada(s), {len(errores)} con error.")
        return {"cargadas": len(creadas), "con_error": len(errores), "actividades": creadas, "errores": errores}

    def carga_masiva_csv(self, db: Session, *, contenido: str, guardarecurso_id: int) -> Dict[str, Any]:
        """
        Procesa un CSV `codigo,tipo,descripcion,fecha,hora_inicio` y asigna
        todas las actividades al mismo guardarecurso.

        Se ignoran las líneas de comentario (`#`) y las líneas vacías o
        compuestas solo de comas. `tipo` acepta el ID o el nombre del
        catálogo; `fecha` acepta YYYY-MM-DD o DD/MM/YYYY.
        NO realiza db.commit().
        """
        self._validar_guardarecurso(db, guardarecurso_id)

        lineas = [linea for linea in contenido.splitlines() if not linea.strip().startswith("#")]
        if not lineas or not lineas[0].strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El archivo CSV está vacío.")

        lector = csv.reader(io.StringIO("\n".join(lineas)))
        encabezados = [h.strip().lower() for h in next(lector)]
        # Plantillas anteriores usan 'horaInicio'
        encabezados = ["hora_inicio" if h == "horainicio" else h for h in encabezados]
        faltantes = [c for c in ("codigo", "tipo", "fecha") if c not in encabezados]
        if faltantes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Encabezados faltantes en el CSV: {', '.join(faltantes)}",
            )

        creadas: List[Actividad] = []
        errores: List[Dict[str, Any]] = []
        for numero, valores in enumerate(lector, start=2):
            valores = [v.strip() for v in valores]
            if not any(valores):
                continue
            fila = dict(zip(encabezados, valores + [""] * (len(encabezados) - len(valores))))
            codigo = fila.get("codigo") or None

            error = None
            if not codigo:
                error = f"Línea {numero}: Falta código"
            elif len(codigo) > CODIGO_MAX_LEN:
                error = f"Línea {numero}: El código excede {CODIGO_MAX_LEN} caracteres"
            elif not fila.get("tipo"):
                error = f"Línea {numero} ({codigo}): Falta tipo de actividad"
            elif not fila.get("fecha"):
                error = f"Línea {numero} ({codigo}): Falta fecha"
            if error:
                errores.append({"indice": numero, "codigo": codigo, "error": error})
                continue

            fecha = _parsear_fecha(fila["fecha"])
            if not fecha:
                errores.append({
                    "indice": numero,
                    "codigo": codigo,
                    "error": f"Línea {numero} ({codigo}): Fecha inválida \"{fila['fecha']}\". Use YYYY-MM-DD o DD/MM/YYYY",
                })
                continue
            hora = _parsear_hora(fila.get("hora_inicio"))
            if hora is None:
                errores.append({
                    "indice": numero,
                    "codigo": codigo,
                    "error": f"Línea {numero} ({codigo}): Hora inválida \"{fila.get('hora_inicio')}\". Use HH:MM",
                })
                continue

            try:
                with db.begin_nested():
                    tipo = self._resolver_tipo(db, fila["tipo"])
                    creadas.append(self._construir(
                        db,
                        tipo=tipo,
                        descripcion=fila.get("descripcion") or tipo.nombre,
                        fecha_programada=combinar_fecha_hora(fecha, hora),
                        usuario_id=guardarecurso_id,
                        codigo=codigo,
                    ))
            except HTTPException as e:
                errores.append({"indice": numero, "codigo": codigo, "error": f"Línea {numero} ({codigo}): {e.detail}"})
            except SQLAlchemyError as e:
                logger.error(f"Error de base de datos al cargar la línea {numero} del CSV: {e}", exc_info=True)
                errores.append({"indice": numero, "codigo": codigo, "error": f"Línea {numero} ({codigo}): No se pudo registrar la actividad."})

        logger.info(f"Carga CSV: {len(creadas)} actividad(es) creada(s), {len(errores)} con error.")
        return {"cargadas": len(creadas), "con_error": len(errores), "actividades": creadas, "errores": errores}

    def plantilla_csv(self, db: Session) -> str:
        """Plantilla de carga masiva con dos filas de ejemplo y la guía de tipos."""
        tipos = tipo_actividad_service.get_all_ordered(db)
        tipos_por_id = sorted(tipos, key=lambda t: t.id)
        tipo_1 = str(tipos_por_id[0].id) if tipos_por_id else "1"
        tipo_2 = str(tipos_por_id[1].id) if len(tipos_por_id) > 1 else tipo_1

        buffer = io.StringIO()
        escritor = csv.writer(buffer, lineterminator="\n")
        escritor.writerow(CSV_COLUMNAS)
        escritor.writerow([
            "ACT-001", tipo_1, "Recorrido de vigilancia en el sector norte del área protegida",
            (hoy() + timedelta(days=7)).isoformat(), "08:00",
        ])
        escritor.writerow([
            "ACT-002", tipo_2, "Inspección de puntos críticos de riesgo de incendios",
            (hoy() + timedelta(days=14)).isoformat(), "09:00",
        ])
        for _ in range(3):
            escritor.writerow([""] * len(CSV_COLUMNAS))

        guia = [
            "",
            "# ========================================",
            "# GUIA DE TIPOS DE ACTIVIDAD:",
            "# ========================================",
        ]
        guia += [f"# {t.id} = {t.nombre}" for t in tipos_por_id]
        guia += [
            "#",
            "# INSTRUCCIONES:",
            "# - En la columna \"tipo\" coloque el ID o el nombre del tipo",
            "# - Fecha en formato YYYY-MM-DD (ej: 2025-11-15) o DD/MM/YYYY (ej: 15/11/2025)",
            "# - Hora en formato HH:MM (ej: 08:00)",
            "# - Puede eliminar estas líneas de comentario antes de cargar el archivo",
        ]
        return buffer.getvalue() + "\n".join(guia) + "\n"


def _parsear_fecha(valor: str) -> Optional[date]:
    for formato in CSV_FORMATOS_FECHA:
        try:
            return datetime.strptime(valor, formato).date()
        except ValueError:
            continue
    return None


def _parsear_hora(valor: Optional[str]) -> Optional[time]:
    """Sin hora se asume 08:00; una hora mal formada devuelve None."""
    if not valor:
        return CSV_HORA_POR_DEFECTO
    try:
        return datetime.strptime(valor, "%H:%M").time()
    except ValueError:
        return None


actividad_service = ActividadService(Actividad, "Actividad")
