"""
Conexión a base de datos
Conjunto Residencial Arkania

Motor asíncrono de SQLAlchemy, fábrica de sesiones y dependencia
`get_async_db` para FastAPI.
"""
import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency que entrega una sesión por request

    Si el endpoint lanza una excepción se hace rollback de lo pendiente.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Crea las tablas, los roles por defecto y el administrador inicial"""
    # Registrar todos los modelos en el metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tablas verificadas en %s", engine.url.render_as_string(hide_password=True))

    if settings.SEED_DEFAULT_ROLES:
        from app.services.role_service import RoleService

        async with AsyncSessionLocal() as session:
            created = await RoleService(session).initialize_default_roles()
            if created:
                logger.info("Roles por defecto creados: %s", ", ".join(created))

    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        async with AsyncSessionLocal() as session:
            await seed_admin_user(session)


async def seed_admin_user(session: AsyncSession):
    """
    Garantiza que exista un administrador con el email de settings.ADMIN_EMAIL

    Crea el usuario si no existe y le asigna el rol ADMINISTRADOR si no lo
    tiene. Retorna el usuario, o None si no se pudo (rol sin crear o
    usuario inactivo).
    """
    from app.core.policies import ADMIN_ROLE
    from app.models.user import DocumentType
    from app.repositories.role_repository import RoleRepository
    from app.repositories.user_repository import UserRepository
    from app.schemas.users import UserCreate
    from app.services.user_role_service import UserRoleService
    from app.services.user_service import UserService

    admin_role = await RoleRepository(session).get_by_name(ADMIN_ROLE)
    if admin_role is None:
        logger.warning("No existe el rol %s; no se crea el administrador inicial", ADMIN_ROLE)
        return None

    user = await UserRepository(session).get_by_email(settings.ADMIN_EMAIL)
    if user is None:
        user = await UserService(session).create_user(UserCreate(
            document_type=DocumentType.CC,
            document_number=settings.ADMIN_DOCUMENT_NUMBER,
            first_name=settings.ADMIN_FIRST_NAME,
            last_name=settings.ADMIN_LAST_NAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
        ))
        logger.info("Administrador inicial creado: %s", user.email)

    if not user.is_active:
        logger.warning("El administrador inicial %s está inactivo", user.email)
        return None

    user_roles = UserRoleService(session)
    if not await user_roles.user_has_role_name(user.id, ADMIN_ROLE):
        await user_roles.assign_role(user.id, admin_role.id)
        logger.info("Rol %s asignado a %s", ADMIN_ROLE, user.email)

    return user
