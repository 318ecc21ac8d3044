import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from guardarecursos.db.base import Base

if TYPE_CHECKING:
    from .rol import Rol
    from .area import Area
    from .equipo import Equipo
    from .actividad import Actividad


class Usuario(Base):
    """
    Modelo ORM para la tabla 'usuarios'.
    Administradores, coordinadores y guardarecursos comparten esta tabla;
    el rol determina qué puede hacer cada uno.
    """
    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(50))
    apellido: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    dpi: Mapped[Optional[str]] = mapped_column(String(13), unique=True, nullable=True)
    telefono: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)
    hashed_password: Mapped[str] = mapped_column("contrasena", String)
    rol_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id"), index=True)
    area_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("areas.id", ondelete="SET NULL"), nullable=True, index=True)
    estado: Mapped[str] = mapped_column(String(20), default="Activo", index=True)
    ultimo_login: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    rol: Mapped["Rol"] = relationship("Rol", back_populates="usuarios", lazy="joined")
    area: Mapped[Optional["Area"]] = relationship("Area", back_populates="guardarecursos", lazy="selectin")

    equipos: Mapped[List["Equipo"]] = relationship("Equipo", back_populates="guardarecurso")
    actividades: Mapped[List["Actividad"]] = relationship("Actividad", back_populates="guardarecurso")

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellido}".strip()

    def __repr__(self) -> str:
        return f"<Usuario(id={self.id}, email='{self.email}', rol_id={self.rol_id})>"
