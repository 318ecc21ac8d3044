import os

# La configuración se lee al importar la app: la BD de pruebas debe definirse antes
os.environ["DATABASE_URI"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "clave-solo-para-pruebas")

import json
import logging
from typing import AsyncGenerator, Awaitable, Callable, Generator, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from guardarecursos.main import app as fastapi_app
from guardarecursos.core.config import settings
from guardarecursos.api.deps import get_db
from guardarecursos.db.base import Base
from guardarecursos.models import Area, Usuario
from guardarecursos.schemas.area import AreaCreate
from guardarecursos.schemas.usuario import GuardarecursoCreate, UsuarioCreate
from guardarecursos.services.area import area_service
from guardarecursos.services.init_data import init_data_service
from guardarecursos.services.usuario import usuario_service

# Configuración básica de logging para los tests
logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] [%(name)s] [%(funcName)s] %(message)s')
logger = logging.getLogger(__name__)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# pysqlite abre transacciones por su cuenta; se delega en SQLAlchemy para que los SAVEPOINT funcionen
@event.listens_for(engine, "connect")
def _sqlite_connect(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


# Contraseñas de prueba
TEST_ADMIN_PASSWORD = "AdminPass123!"
TEST_COORDINADOR_PASSWORD = "CoordPass123!"
TEST_GUARDARECURSO_PASSWORD = "GuardaPass123!"

API = settings.API_V1_STR


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """Instancia de la aplicación FastAPI para los tests."""
    return fastapi_app


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Esquema limpio y una sesión de BD por cada test."""
    Base.metadata.create_all(bind=engine)
    db_session = TestingSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=engine)


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI, db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP asíncrono que comparte la sesión de BD del test."""
    def override_get_db_for_test():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db_for_test
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


async def get_auth_token(client: AsyncClient, username: str, password: str) -> Optional[str]:
    """Obtiene un token a través del endpoint real de login."""
    login_data = {"username": username, "password": password}
    url = f"{API}/auth/login/access-token"
    try:
        response = await client.post(url, data=login_data)
        response.raise_for_status()
        return response.json().get("access_token")
    except httpx.HTTPStatusError as e:
        try:
            error_detail = e.response.json()
        except json.JSONDecodeError:
            error_detail = e.response.text
        logger.error(f"FALLO al obtener token para '{username}': Status={e.response.status_code}. Detail: {error_detail}")
        return None


# ==============================================================================
# Datos base
# ==============================================================================

@pytest.fixture(scope="function")
def datos_base(db: Session) -> dict:
    """Roles, tipos de actividad, ecosistemas y departamentos."""
    created = init_data_service.inicializar(db)
    db.commit()
    return created


@pytest.fixture(scope="function")
def area_protegida(db: Session, datos_base: dict) -> Area:
    area = area_service.create(db, obj_in=AreaCreate(
        nombre="Parque Nacional Laguna Lachuá",
        descripcion="Laguna cárstica rodeada de bosque tropical",
        extension=14500,
        lat=15.92,
        lng=-90.67,
        departamento="Alta Verapaz",
        ecosistemas=["Bosque Tropical Húmedo"],
    ))
    db.commit()
    db.refresh(area)
    return area


@pytest.fixture(scope="function")
def admin_user(db: Session, datos_base: dict) -> Usuario:
    user = usuario_service.crear_administrador(db, obj_in=UsuarioCreate(
        nombre="Ana", apellido="Administradora", email="admin@conap.gob.gt", password=TEST_ADMIN_PASSWORD,
    ))
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def coordinador_user(db: Session, datos_base: dict) -> Usuario:
    user = usuario_service.crear_coordinador(db, obj_in=UsuarioCreate(
        nombre="Carlos", apellido="Coordinador", email="coordinador@conap.gob.gt",
        dpi="1234567890101", password=TEST_COORDINADOR_PASSWORD,
    ))
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def guardarecurso_user(db: Session, area_protegida: Area) -> Usuario:
    user = usuario_service.crear_guardarecurso(db, obj_in=GuardarecursoCreate(
        nombre="Gabriela", apellido="Guardarecurso", email="guarda@conap.gob.gt",
        dpi="2234567890101", telefono="55551234", password=TEST_GUARDARECURSO_PASSWORD,
        area_id=area_protegida.id,
    ))
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def otro_guardarecurso_user(db: Session, area_protegida: Area) -> Usuario:
    user = usuario_service.crear_guardarecurso(db, obj_in=GuardarecursoCreate(
        nombre="Mario", apellido="Monterroso", email="guarda2@conap.gob.gt",
        password=TEST_GUARDARECURSO_PASSWORD, area_id=area_protegida.id,
    ))
    db.commit()
    db.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def auth_token_admin(client: AsyncClient, admin_user: Usuario) -> Optional[str]:
    return await get_auth_token(client, admin_user.email, TEST_ADMIN_PASSWORD)


@pytest_asyncio.fixture(scope="function")
async def auth_token_coordinador(client: AsyncClient, coordinador_user: Usuario) -> Optional[str]:
    return await get_auth_token(client, coordinador_user.email, TEST_COORDINADOR_PASSWORD)


@pytest_asyncio.fixture(scope="function")
async def auth_token_guardarecurso(client: AsyncClient, guardarecurso_user: Usuario) -> Optional[str]:
    return await get_auth_token(client, guardarecurso_user.email, TEST_GUARDARECURSO_PASSWORD)


@pytest_asyncio.fixture(scope="function")
async def auth_token_otro_guardarecurso(client: AsyncClient, otro_guardarecurso_user: Usuario) -> Optional[str]:
    return await get_auth_token(client, otro_guardarecurso_user.email, TEST_GUARDARECURSO_PASSWORD)


@pytest.fixture(scope="function")
def login(client: AsyncClient) -> Callable[[str, str], Awaitable[Optional[str]]]:
    """Helper para obtener el token de un usuario creado dentro del test."""
    async def _login(email: str, password: str) -> Optional[str]:
        return await get_auth_token(client, email, password)
    return _login
