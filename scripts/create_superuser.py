import sys
from os.path import abspath, dirname

root_dir = dirname(dirname(abspath(__file__)))
sys.path.append(root_dir)

from sqlalchemy.orm import Session
from guardarecursos.db.session import SessionLocal
from guardarecursos.services.usuario import usuario_service
from guardarecursos.services.init_data import init_data_service
from guardarecursos.schemas.usuario import UsuarioCreate
from guardarecursos.core.config import settings

def create_superuser():
    """
    Script síncrono que carga los catálogos base y crea el primer
    Administrador a partir de variables de entorno.
    """
    db: Session = SessionLocal()

    print("--- Iniciando script para crear superusuario ---")

    try:
        # 1. Catálogos base (roles, tipos de actividad, ecosistemas, departamentos)
        created = init_data_service.inicializar(db)
        db.commit()
        for catalogo, nombres in created.items():
            print(f"{catalogo}: {len(nombres)} registro(s) nuevo(s)")

        # 2. Leer credenciales desde variables de entorno
        admin_email = settings.SUPERUSER_EMAIL
        admin_password = settings.SUPERUSER_PASSWORD

        if not all([admin_email, admin_password]):
            print("!!! ERROR: Define SUPERUSER_EMAIL y SUPERUSER_PASSWORD en tu archivo .env. Saliendo. !!!")
            return

        # 3. Verificar si el superusuario ya existe
        superuser = usuario_service.get_by_email(db, email=admin_email)

        if not superuser:
            print(f"Creando superusuario con email: {admin_email}")

            superuser_in = UsuarioCreate(
                nombre="Administrador",
                apellido="Sistema",
                email=admin_email,
                password=admin_password,
            )
            usuario_service.crear_administrador(db, obj_in=superuser_in)
            db.commit()
            print("¡Superusuario creado exitosamente!")
        else:
            print(f"El superusuario con email '{admin_email}' ya existe.")

    except Exception as e:
        print(f"Ocurrió un error: {e}")
        db.rollback()
    finally:
        print("--- Script finalizado ---")
        db.close()

if __name__ == "__main__":
    create_superuser()
