"""
Estructura inicial de la base de datos de guardarecursos

Revision ID: 1c5e0a7b9d21
Revises:
Create Date: 2026-10-18 09:00:00.000000

Descripción:
Crea las tablas de roles, usuarios, catálogos (departamentos, ecosistemas y
tipos de actividad), áreas protegidas, equipos, actividades con su ruta GPS y
evidencias, hallazgos, incidentes y seguimientos. Los datos base se cargan con
POST /init/data o con scripts/create_superuser.py.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '1c5e0a7b9d21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # === Catálogos ===
    op.create_table('roles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=50), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_roles')),
    )
    op.create_index(op.f('ix_roles_nombre'), 'roles', ['nombre'], unique=True)

    op.create_table('departamentos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_departamentos')),
    )
    op.create_index(op.f('ix_departamentos_nombre'), 'departamentos', ['nombre'], unique=True)

    op.create_table('ecosistemas',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_ecosistemas')),
    )
    op.create_index(op.f('ix_ecosistemas_nombre'), 'ecosistemas', ['nombre'], unique=True)

    op.create_table('tipos_actividad',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_tipos_actividad')),
    )
    op.create_index(op.f('ix_tipos_actividad_nombre'), 'tipos_actividad', ['nombre'], unique=True)

    # === Áreas protegidas ===
    op.create_table('areas',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=150), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('extension', sa.Float(), nullable=True),
        sa.Column('latitud', sa.Float(), nullable=False),
        sa.Column('longitud', sa.Float(), nullable=False),
        sa.Column('departamento_id', sa.Integer(), nullable=False),
        sa.Column('ecosistema_id', sa.Integer(), nullable=True),
        sa.Column('estado', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['departamento_id'], ['departamentos.id'], name=op.f('fk_areas_departamento_id_departamentos'), ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['ecosistema_id'], ['ecosistemas.id'], name=op.f('fk_areas_ecosistema_id_ecosistemas'), ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_areas')),
    )
    op.create_index(op.f('ix_areas_nombre'), 'areas', ['nombre'], unique=True)
    op.create_index(op.f('ix_areas_departamento_id'), 'areas', ['departamento_id'], unique=False)
    op.create_index(op.f('ix_areas_ecosistema_id'), 'areas', ['ecosistema_id'], unique=False)
    op.create_index(op.f('ix_areas_estado'), 'areas', ['estado'], unique=False)

    # === Usuarios ===
    op.create_table('usuarios',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=50), nullable=False),
        sa.Column('apellido', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('dpi', sa.String(length=13), nullable=True),
        sa.Column('telefono', sa.String(length=15), nullable=True),
        sa.Column('contrasena', sa.String(), nullable=False),
        sa.Column('rol_id', sa.Integer(), nullable=False),
        sa.Column('area_id', sa.Integer(), nullable=True),
        sa.Column('estado', sa.String(length=20), nullable=False),
        sa.Column('ultimo_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['rol_id'], ['roles.id'], name=op.f('fk_usuarios_rol_id_roles')),
        sa.ForeignKeyConstraint(['area_id'], ['areas.id'], name=op.f('fk_usuarios_area_id_areas'), ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_usuarios')),
        sa.UniqueConstraint('dpi', name=op.f('uq_usuarios_dpi')),
    )
    op.create_index(op.f('ix_usuarios_email'), 'usuarios', ['email'], unique=True)
    op.create_index(op.f('ix_usuarios_rol_id'), 'usuarios', ['rol_id'], unique=False)
    op.create_index(op.f('ix_usuarios_area_id'), 'usuarios', ['area_id'], unique=False)
    op.create_index(op.f('ix_usuarios_estado'), 'usuarios', ['estado'], unique=False)

    # === Equipos ===
    op.create_table('equipos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('codigo', sa.String(length=50), nullable=False),
        sa.Column('tipo', sa.String(length=50), nullable=True),
        sa.Column('marca', sa.String(length=50), nullable=True),
        sa.Column('modelo', sa.String(length=50), nullable=True),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('estado', sa.String(length=30), nullable=False),
        sa.Column('usuario_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['usuario_id'], ['usuarios.id'], name=op.f('fk_equipos_usuario_id_usuarios'), ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_equipos')),
    )
    op.create_index(op.f('ix_equipos_codigo'), 'equipos', ['codigo'], unique=True)
    op.create_index(op.f('ix_equipos_estado'), 'equipos', ['estado'], unique=False)
    op.create_index(op.f('ix_equipos_usuario_id'), 'equipos', ['usuario_id'], unique=False)

    # === Actividades y geolocalización ===
    op.create_table('actividades',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('codigo', sa.String(length=50), nullable=True),
        sa.Column('tipo_id', sa.Integer(), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=False),
        sa.Column('fecha_programada', sa.DateTime(timezone=True), nullable=False),
        sa.Column('fecha_inicio', sa.DateTime(timezone=True), nullable=True),
        sa.Column('fecha_fin', sa.DateTime(timezone=True), nullable=True),
        sa.Column('latitud_inicio', sa.Float(), nullable=True),
        sa.Column('longitud_inicio', sa.Float(), nullable=True),
        sa.Column('latitud_fin', sa.Float(), nullable=True),
        sa.Column('longitud_fin', sa.Float(), nullable=True),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('estado', sa.String(length=20), nullable=False),
        sa.Column('usuario_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['tipo_id'], ['tipos_actividad.id'], name=op.f('fk_actividades_tipo_id_tipos_actividad'), ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['usuario_id'], ['usuarios.id'], name=op.f('fk_actividades_usuario_id_usuarios'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_actividades')),
    )
    op.create_index(op.f('ix_actividades_codigo'), 'actividades', ['codigo'], unique=False)
    op.create_index(op.f('ix_actividades_tipo_id'), 'actividades', ['tipo_id'], unique=False)
    op.create_index(op.f('ix_actividades_fecha_programada'), 'actividades', ['fecha_programada'], unique=False)
    op.create_index(op.f('ix_actividades_estado'), 'actividades', ['estado'], unique=False)
    op.create_index(op.f('ix_actividades_usuario_id'), 'actividades', ['usuario_id'], unique=False)

    op.create_table('geolocalizaciones',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('actividad_id', sa.Integer(), nullable=False),
        sa.Column('latitud', sa.Float(), nullable=False),
        sa.Column('longitud', sa.Float(), nullable=False),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['actividad_id'], ['actividades.id'], name=op.f('fk_geolocalizaciones_actividad_id_actividades'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_geolocalizaciones')),
    )
    op.create_index(op.f('ix_geolocalizaciones_actividad_id'), 'geolocalizaciones', ['actividad_id'], unique=False)
    op.create_index(op.f('ix_geolocalizaciones_fecha'), 'geolocalizaciones', ['fecha'], unique=False)

    op.create_table('fotografias',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('actividad_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('latitud', sa.Float(), nullable=True),
        sa.Column('longitud', sa.Float(), nullable=True),
        sa.Column('usuario_id', sa.Integer(), nullable=False),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['actividad_id'], ['actividades.id'], name=op.f('fk_fotografias_actividad_id_actividades'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['usuario_id'], ['usuarios.id'], name=op.f('fk_fotografias_usuario_id_usuarios'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_fotografias')),
    )
    op.create_index(op.f('ix_fotografias_actividad_id'), 'fotografias', ['actividad_id'], unique=False)
    op.create_index(op.f('ix_fotografias_usuario_id'), 'fotografias', ['usuario_id'], unique=False)

    # === Hallazgos, incidentes y seguimientos ===
    op.create_table('hallazgos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('titulo', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=False),
        sa.Column('prioridad', sa.String(length=20), nullable=False),
        sa.Column('latitud', sa.Float(), nullable=True),
        sa.Column('longitud', sa.Float(), nullable=True),
        sa.Column('estado', sa.String(length=30), nullable=False),
        sa.Column('usuario_id', sa.Integer(), nullable=False),
        sa.Column('actividad_id', sa.Integer(), nullable=True),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['usuario_id'], ['usuarios.id'], name=op.f('fk_hallazgos_usuario_id_usuarios'), ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['actividad_id'], ['actividades.id'], name=op.f('fk_hallazgos_actividad_id_actividades'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_hallazgos')),
    )
    op.create_index(op.f('ix_hallazgos_prioridad'), 'hallazgos', ['prioridad'], unique=False)
    op.create_index(op.f('ix_hallazgos_estado'), 'hallazgos', ['estado'], unique=False)
    op.create_index(op.f('ix_hallazgos_usuario_id'), 'hallazgos', ['usuario_id'], unique=False)
    op.create_index(op.f('ix_hallazgos_actividad_id'), 'hallazgos', ['actividad_id'], unique=False)
    op.create_index(op.f('ix_hallazgos_fecha'), 'hallazgos', ['fecha'], unique=False)

    op.create_table('incidentes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('titulo', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=False),
        sa.Column('gravedad', sa.String(length=20), nullable=False),
        sa.Column('estado', sa.String(length=30), nullable=False),
        sa.Column('usuario_id', sa.Integer(), nullable=False),
        sa.Column('area_id', sa.Integer(), nullable=True),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['usuario_id'], ['usuarios.id'], name=op.f('fk_incidentes_usuario_id_usuarios'), ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['area_id'], ['areas.id'], name=op.f('fk_incidentes_area_id_areas'), ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_incidentes')),
    )
    op.create_index(op.f('ix_incidentes_gravedad'), 'incidentes', ['gravedad'], unique=False)
    op.create_index(op.f('ix_incidentes_estado'), 'incidentes', ['estado'], unique=False)
    op.create_index(op.f('ix_incidentes_usuario_id'), 'incidentes', ['usuario_id'], unique=False)
    op.create_index(op.f('ix_incidentes_area_id'), 'incidentes', ['area_id'], unique=False)
    op.create_index(op.f('ix_incidentes_fecha'), 'incidentes', ['fecha'], unique=False)

    op.create_table('seguimientos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('hallazgo_id', sa.Integer(), nullable=True),
        sa.Column('incidente_id', sa.Integer(), nullable=True),
        sa.Column('accion', sa.String(length=200), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=False),
        sa.Column('usuario_id', sa.Integer(), nullable=False),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('(hallazgo_id IS NOT NULL) OR (incidente_id IS NOT NULL)', name=op.f('ck_seguimientos_referencia_requerida')),
        sa.ForeignKeyConstraint(['hallazgo_id'], ['hallazgos.id'], name=op.f('fk_seguimientos_hallazgo_id_hallazgos'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['incidente_id'], ['incidentes.id'], name=op.f('fk_seguimientos_incidente_id_incidentes'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['usuario_id'], ['usuarios.id'], name=op.f('fk_seguimientos_usuario_id_usuarios'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_seguimientos')),
    )
    op.create_index(op.f('ix_seguimientos_hallazgo_id'), 'seguimientos', ['hallazgo_id'], unique=False)
    op.create_index(op.f('ix_seguimientos_incidente_id'), 'seguimientos', ['incidente_id'], unique=False)
    op.create_index(op.f('ix_seguimientos_usuario_id'), 'seguimientos', ['usuario_id'], unique=False)


def downgrade() -> None:
    op.drop_table('seguimientos')
    op.drop_table('incidentes')
    op.drop_table('hallazgos')
    op.drop_table('fotografias')
    op.drop_table('geolocalizaciones')
    op.drop_table('actividades')
    op.drop_table('equipos')
    op.drop_table('usuarios')
    op.drop_table('areas')
    op.drop_table('tipos_actividad')
    op.drop_table('ecosistemas')
    op.drop_table('departamentos')
    op.drop_table('roles')
