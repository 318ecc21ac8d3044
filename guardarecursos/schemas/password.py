from pydantic import BaseModel, Field


class CambioContrasenaAdmin(BaseModel):
    """
    Cambio de contraseña de otro usuario (Administrador o Coordinador).
    La longitud se valida después de las reglas de rol.
    """
    nueva_contrasena: str = Field(..., description="Nueva contraseña para el usuario objetivo")


class CambioContrasenaPropia(BaseModel):
    """
    Schema para el cambio de contraseña de un usuario autenticado.
    """
    contrasena_actual: str = Field(..., description="La contraseña actual del usuario.")
    nueva_contrasena: str = Field(..., description="La nueva contraseña.")
    confirmar_contrasena: str = Field(..., description="Repetición de la nueva contraseña.")
