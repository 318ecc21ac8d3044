from typing import TYPE_CHECKING, List, Optional
from datetime import datetime

from sqlalchemy import Integer, String, Text, Float, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .departamento import Departamento
    from .ecosistema import Ecosistema
    from .usuario import Usuario


class Area(Base):
    """
    Modelo ORM para la tabla 'areas' (áreas protegidas).
    """
    __tablename__ = "areas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(150), unique=True, index=True)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    extension: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    latitud: Mapped[float] = mapped_column(Float)
    longitud: Mapped[float] = mapped_column(Float)
    departamento_id: Mapped[int] = mapped_column(Integer, ForeignKey("departamentos.id", ondelete="RESTRICT"), index=True)
    ecosistema_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("ecosistemas.id", ondelete="SET NULL"), nullable=True, index=True)
    estado: Mapped[str] = mapped_column(String(20), default="Activo", index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    departamento: Mapped["Departamento"] = relationship("Departamento", back_populates="areas", lazy="joined")
    ecosistema: Mapped[Optional["Ecosistema"]] = relationship("Ecosistema", back_populates="areas", lazy="joined")
    guardarecursos: Mapped[List["Usuario"]] = relationship("Usuario", back_populates="area")

    def __repr__(self) -> str:
        return f"<Area(id={self.id}, nombre='{self.nombre}', estado='{self.estado}')>"
