from datetime import datetime, timedelta
from typing import Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.email_dispatcher import HttpEmailDispatcher, LogNotificationDispatcher
from src.adapter.services.identity_toolkit import DisabledIdentityStore, IdentityToolkitClient
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.identity_store import IIdentityStore
from src.app.services.identity_synchronizer import IdentitySynchronizer
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.otp_manager import OtpManager
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> Callable[[], datetime]:
    return datetime.utcnow


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(
        n=ApplicationConfig.SCRYPT_N,
        r=ApplicationConfig.SCRYPT_R,
        p=ApplicationConfig.SCRYPT_P,
        dklen=ApplicationConfig.SCRYPT_DKLEN,
        salt_bytes=ApplicationConfig.SCRYPT_SALT_BYTES,
    )


def get_notification_dispatcher() -> INotificationDispatcher:
    if ApplicationConfig.EMAIL_BACKEND == "http":
        return HttpEmailDispatcher(
            api_url=ApplicationConfig.EMAIL_API_URL,
            api_token=ApplicationConfig.EMAIL_API_TOKEN,
            from_address=ApplicationConfig.EMAIL_FROM_ADDRESS,
            from_name=ApplicationConfig.EMAIL_FROM_NAME,
            expires_in_minutes=ApplicationConfig.OTP_TTL_MINUTES,
            timeout_seconds=ApplicationConfig.EMAIL_TIMEOUT_SECONDS,
        )
    return LogNotificationDispatcher()


def get_identity_store() -> IIdentityStore:
    if not ApplicationConfig.IDENTITY_STORE_ENABLED:
        return DisabledIdentityStore()
    return IdentityToolkitClient(
        base_url=ApplicationConfig.IDENTITY_STORE_BASE_URL,
        project_id=ApplicationConfig.IDENTITY_STORE_PROJECT_ID,
        access_token=ApplicationConfig.IDENTITY_STORE_ACCESS_TOKEN,
        timeout_seconds=ApplicationConfig.IDENTITY_STORE_TIMEOUT_SECONDS,
    )


def get_identity_synchronizer(
    identity_store: IIdentityStore = Depends(get_identity_store),
) -> IdentitySynchronizer:
    return IdentitySynchronizer(
        identity_store, timeout_seconds=ApplicationConfig.IDENTITY_STORE_TIMEOUT_SECONDS
    )


def get_otp_manager(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> OtpManager:
    return OtpManager(
        uow,
        code_length=ApplicationConfig.OTP_LENGTH,
        ttl=timedelta(minutes=ApplicationConfig.OTP_TTL_MINUTES),
        max_attempts=ApplicationConfig.OTP_MAX_ATTEMPTS,
        clock=clock,
    )


def get_reset_token_manager(
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ResetTokenManager:
    return ResetTokenManager(
        uow,
        ttl=timedelta(minutes=ApplicationConfig.RESET_TOKEN_TTL_MINUTES),
        token_bytes=ApplicationConfig.RESET_TOKEN_BYTES,
        clock=clock,
    )
