from typing import TYPE_CHECKING, List, Optional
from datetime import datetime

from sqlalchemy import Integer, String, Text, Float, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .tipo_actividad import TipoActividad
    from .usuario import Usuario
    from .geolocalizacion import Geolocalizacion
    from .hallazgo import Hallazgo
    from .fotografia import Fotografia


class Actividad(Base):
    """
    Modelo ORM para la tabla 'actividades'.

    Ciclo de vida: Programada -> En Progreso -> Completada, o Programada -> Cancelada.
    `fecha_inicio` solo se fija al pasar a En Progreso y `fecha_fin` solo al
    pasar a Completada.
    """
    __tablename__ = "actividades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    codigo: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    tipo_id: Mapped[int] = mapped_column(Integer, ForeignKey("tipos_actividad.id", ondelete="RESTRICT"), index=True)
    descripcion: Mapped[str] = mapped_column(Text)
    fecha_programada: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    fecha_inicio: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    fecha_fin: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    latitud_inicio: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitud_inicio: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    latitud_fin: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitud_fin: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    observaciones: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estado: Mapped[str] = mapped_column(String(20), default="Programada", index=True)
    usuario_id: Mapped[int] = mapped_column(Integer, ForeignKey("usuarios.id", ondelete="RESTRICT"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    tipo: Mapped["TipoActividad"] = relationship("TipoActividad", back_populates="actividades", lazy="joined")
    guardarecurso: Mapped["Usuario"] = relationship("Usuario", back_populates="actividades", lazy="joined")
    puntos: Mapped[List["Geolocalizacion"]] = relationship(
        "Geolocalizacion",
        back_populates="actividad",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Geolocalizacion.id",
    )
    hallazgos: Mapped[List["Hallazgo"]] = relationship(
        "Hallazgo",
        back_populates="actividad",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    evidencias: Mapped[List["Fotografia"]] = relationship(
        "Fotografia",
        back_populates="actividad",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Actividad(id={self.id}, estado='{self.estado}', usuario_id={self.usuario_id})>"
