from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator

from .enums import EstadoUsuarioEnum
from .validators import normalizar_email, validar_dpi, validar_telefono

# ===============================================================
# Schemas anidados
# ===============================================================
class RolSimple(BaseModel):
    """Información pública de un Rol para respuestas anidadas."""
    id: int
    nombre: str

    model_config = ConfigDict(from_attributes=True)

class AreaAsignada(BaseModel):
    id: int
    nombre: str

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# Schemas para Usuario (Administradores y Coordinadores)
# ===============================================================
class UsuarioBase(BaseModel):
    """Campos base que comparte un usuario."""
    nombre: str = Field(..., min_length=1, max_length=50)
    apellido: str = Field(..., min_length=1, max_length=50)
    email: EmailStr = Field(..., description="Correo electrónico, usado como nombre de usuario")
    telefono: Optional[str] = Field(None, description="Teléfono de 8 dígitos")

    @field_validator("email", mode="before")
    @classmethod
    def email_normalizado(cls, v):
        return normalizar_email(v)

    @field_validator("telefono")
    @classmethod
    def telefono_valido(cls, v: Optional[str]) -> Optional[str]:
        return validar_telefono(v)

class UsuarioCreate(UsuarioBase):
    """Crea un Coordinador. El rol y el estado inicial los fija el servidor."""
    dpi: Optional[str] = Field(None, description="Documento Personal de Identificación (13 dígitos)")
    password: str = Field(..., min_length=6, description="Contraseña inicial")

    @field_validator("dpi")
    @classmethod
    def dpi_valido(cls, v: Optional[str]) -> Optional[str]:
        return validar_dpi(v)

class UsuarioUpdate(BaseModel):
    """Actualización parcial de datos personales."""
    nombre: Optional[str] = Field(None, min_length=1, max_length=50)
    apellido: Optional[str] = Field(None, min_length=1, max_length=50)
    telefono: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def email_normalizado(cls, v):
        return normalizar_email(v)

    @field_validator("telefono")
    @classmethod
    def telefono_valido(cls, v: Optional[str]) -> Optional[str]:
        return validar_telefono(v)

class UsuarioEstadoUpdate(BaseModel):
    estado: EstadoUsuarioEnum

class Usuario(BaseModel):
    """
    Schema para devolver al cliente. Excluye la contraseña e incluye
    el rol y el área anidados.
    """
    id: int
    nombre: str
    apellido: str
    email: str
    dpi: Optional[str] = None
    telefono: Optional[str] = None
    estado: EstadoUsuarioEnum
    rol: RolSimple
    area: Optional[AreaAsignada] = None
    ultimo_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class UsuarioSimple(BaseModel):
    id: int
    nombre: str
    apellido: str

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# Schemas para Guardarecursos
# ===============================================================
class GuardarecursoCreate(UsuarioBase):
    dpi: Optional[str] = Field(None, description="Documento Personal de Identificación (13 dígitos)")
    password: str = Field(..., min_length=6)
    area_id: Optional[int] = Field(None, description="Área protegida asignada")

    @field_validator("dpi")
    @classmethod
    def dpi_valido(cls, v: Optional[str]) -> Optional[str]:
        return validar_dpi(v)

class GuardarecursoUpdate(BaseModel):
    """Solo el teléfono y el área asignada son editables para un guardarecurso."""
    telefono: Optional[str] = None
    area_id: Optional[int] = None

    @field_validator("telefono")
    @classmethod
    def telefono_valido(cls, v: Optional[str]) -> Optional[str]:
        return validar_telefono(v)
