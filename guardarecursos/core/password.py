import bcrypt
import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica si una contraseña plana coincide con una contraseña hasheada usando bcrypt.

    Args:
        plain_password: La contraseña en texto plano.
        hashed_password: La contraseña hasheada almacenada (como string).

    Returns:
        True si las contraseñas coinciden, False en caso contrario.
    """
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        # checkpw lanza ValueError si el hash almacenado no es válido
        logger.error(f"Error verificando password (posiblemente hash inválido): {e}")
        return False


def get_password_hash(password: str) -> str:
    """
    Genera el hash de una contraseña usando bcrypt y lo devuelve como string
    para su almacenamiento.
    """
    hashed_password_bytes = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
    return hashed_password_bytes.decode('utf-8')
