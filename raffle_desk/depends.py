from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from raffle_desk.adapter.services.rate_window_store import (
    MemoryRateWindowStore,
    RedisRateWindowStore,
)
from raffle_desk.adapter.services.smtp_mailer import SmtpMailer
from raffle_desk.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from raffle_desk.app.dispatcher import ActionDispatcher
from raffle_desk.app.services.mailer import IMailer
from raffle_desk.app.services.rate_limiter import RateLimiter, rules_from_config
from raffle_desk.app.services.unit_of_work import UnitOfWork


def _connect_args(db_uri: str) -> dict:
    # sqlite waits this long on a locked database before failing
    if db_uri.startswith("sqlite"):
        return {"timeout": ApplicationConfig.STORE_TIMEOUT_SECONDS}
    return {}


engine = create_async_engine(
    ApplicationConfig.DB_URI,
    echo=False,
    future=True,
    connect_args=_connect_args(ApplicationConfig.DB_URI),
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

_rate_limiter: Optional[RateLimiter] = None


async def init_db() -> None:
    """Create missing tables"""
    import raffle_desk.domain.entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)

def build_rate_limiter() -> RateLimiter:
    if ApplicationConfig.CACHE_BACKEND == "memory":
        store = MemoryRateWindowStore()
    else:
        store = RedisRateWindowStore(ApplicationConfig.REDIS_URL)
    return RateLimiter(store, rules_from_config(ApplicationConfig.RATE_LIMITS))

def get_rate_limiter() -> RateLimiter:
    # Counters must outlive a single request
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = build_rate_limiter()
    return _rate_limiter

async def close_rate_limiter() -> None:
    global _rate_limiter
    if _rate_limiter is not None:
        await _rate_limiter.store.close()
        _rate_limiter = None

def get_mailer() -> IMailer:
    return SmtpMailer()

def get_dispatcher(
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    mailer: IMailer = Depends(get_mailer),
) -> ActionDispatcher:
    return ActionDispatcher(uow, rate_limiter, mailer)
