"""
===============================================================================
CRC CARD — catalog/container.py (Composition Root / DI manual)
===============================================================================

Responsibilities:
  - Componer repositorios, publishers y el coordinator de auditoría (DIP).
  - Exponer factories para el host (capa HTTP, CLI) y para el worker.
  - Mantener recursos pesados como singletons con lru_cache.
  - Centralizar decisiones de runtime según Settings.

Collaborators:
  - crosscutting.config.get_settings
  - application.auditing.coordinator.PlateAuditCoordinator
  - application.usecases.*
  - infrastructure.* (implementaciones)

Patterns:
  - Composition Root
  - Singletons lazy con lru_cache

Notes:
  - Sin lógica de negocio.
  - APP_ENV=test cablea adaptadores in-memory (sin Postgres, sin Redis).
  - Si el publisher RQ no se puede construir (rq ausente, job path roto) se
    degrada a in-memory con un warning: la escritura de plates no depende
    de la cola.
===============================================================================
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Callable, TypeVar

from redis import Redis

from .application.auditing.coordinator import PlateAuditCoordinator
from .application.unit_of_work import UnitOfWork, UnitOfWorkFactory
from .application.usecases import (
    CalculatePriceUseCase,
    CreatePlateUseCase,
    GetPlateUseCase,
    RecordAuditWorkItemUseCase,
    ReservePlateUseCase,
    SellPlateUseCase,
    UnreservePlateUseCase,
    UpdatePlatePriceUseCase,
)
from .crosscutting.config import get_settings
from .crosscutting.logger import logger
from .domain.repositories import AuditLogRepository
from .domain.services import (
    AuditPublisher,
    CurrentUserProvider,
    IntegrationEventPublisher,
)
from .identity.current_user import CurrentUserService
from .infrastructure.queue import (
    InMemoryAuditPublisher,
    InMemoryIntegrationEventPublisher,
    QueueConfigurationError,
    RQAuditPublisher,
    RQIntegrationEventPublisher,
    RQQueueConfig,
)
from .infrastructure.repositories import (
    InMemoryAuditLogRepository,
    InMemoryPlateStore,
    InMemoryUnitOfWork,
    PostgresAuditLogRepository,
    PostgresUnitOfWork,
)

P = TypeVar("P")

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    return get_settings().is_test()


def _queue_config(queue_name: str) -> RQQueueConfig:
    settings = get_settings()
    return RQQueueConfig(
        queue_name=queue_name,
        retry_max_attempts=settings.audit_retry_max_attempts,
        job_timeout_seconds=settings.audit_job_timeout_seconds,
        result_ttl_seconds=settings.audit_result_ttl_seconds,
    )


def _rq_or_in_memory(build: Callable[[], P], fallback: Callable[[], P], name: str) -> P:
    """Construye el publisher RQ; ante mala configuración usa el in-memory."""
    try:
        return build()
    except QueueConfigurationError:
        logger.warning(
            "Queue publisher misconfigured; falling back to in-memory publisher",
            exc_info=True,
            extra={"publisher": name},
        )
        return fallback()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_plate_store() -> InMemoryPlateStore:
    """Store compartido detrás de InMemoryUnitOfWork (solo en test)."""
    return InMemoryPlateStore()


@lru_cache(maxsize=1)
def get_audit_log_repository() -> AuditLogRepository:
    if _is_test_env():
        return InMemoryAuditLogRepository()
    return PostgresAuditLogRepository()


# =============================================================================
# Servicios externos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_redis_client() -> Redis | None:
    """Cliente Redis de las colas (None si no está configurado)."""
    redis_url = get_settings().redis_url.strip()
    if not redis_url:
        return None
    return Redis.from_url(redis_url)


@lru_cache(maxsize=1)
def get_audit_publisher() -> AuditPublisher:
    """
    Borde con el bus de mensajes.

    Sin Redis (tests / dev local) los items solo quedan en memoria.
    """
    redis_client = get_redis_client()
    if _is_test_env() or redis_client is None:
        return InMemoryAuditPublisher()

    return _rq_or_in_memory(
        lambda: RQAuditPublisher(
            redis=redis_client,
            config=_queue_config(get_settings().audit_queue_name),
        ),
        InMemoryAuditPublisher,
        "audit",
    )


@lru_cache(maxsize=1)
def get_integration_event_publisher() -> IntegrationEventPublisher:
    redis_client = get_redis_client()
    if _is_test_env() or redis_client is None:
        return InMemoryIntegrationEventPublisher()

    return _rq_or_in_memory(
        lambda: RQIntegrationEventPublisher(
            redis=redis_client,
            config=_queue_config(get_settings().integration_events_queue_name),
        ),
        InMemoryIntegrationEventPublisher,
        "integration-events",
    )


@lru_cache(maxsize=1)
def get_current_user_provider() -> CurrentUserProvider:
    return CurrentUserService()


@lru_cache(maxsize=1)
def get_publish_executor() -> ThreadPoolExecutor:
    """Threads de fondo para el publish fire-and-forget."""
    return ThreadPoolExecutor(
        max_workers=get_settings().audit_publish_workers,
        thread_name_prefix="audit-publish",
    )


@lru_cache(maxsize=1)
def get_audit_coordinator() -> PlateAuditCoordinator:
    return PlateAuditCoordinator(
        publisher=get_audit_publisher(),
        current_user=get_current_user_provider(),
        executor=get_publish_executor(),
    )


# =============================================================================
# Unit of work
# =============================================================================


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    """Cada llamada a la factory devuelta abre una transacción auditada nueva."""
    coordinator = get_audit_coordinator()

    if _is_test_env():
        store = get_plate_store()

        def _in_memory() -> UnitOfWork:
            return InMemoryUnitOfWork(store, interceptors=[coordinator])

        return _in_memory

    def _postgres() -> UnitOfWork:
        return PostgresUnitOfWork(interceptors=[coordinator])

    return _postgres


# =============================================================================
# Casos de uso (instancia nueva por llamada)
# =============================================================================


def get_create_plate_use_case() -> CreatePlateUseCase:
    return CreatePlateUseCase(get_unit_of_work_factory())


def get_update_plate_price_use_case() -> UpdatePlatePriceUseCase:
    return UpdatePlatePriceUseCase(get_unit_of_work_factory())


def get_get_plate_use_case() -> GetPlateUseCase:
    return GetPlateUseCase(get_unit_of_work_factory())


def get_reserve_plate_use_case() -> ReservePlateUseCase:
    return ReservePlateUseCase(
        get_unit_of_work_factory(), events=get_integration_event_publisher()
    )


def get_unreserve_plate_use_case() -> UnreservePlateUseCase:
    return UnreservePlateUseCase(
        get_unit_of_work_factory(), events=get_integration_event_publisher()
    )


def get_sell_plate_use_case() -> SellPlateUseCase:
    return SellPlateUseCase(
        get_unit_of_work_factory(), events=get_integration_event_publisher()
    )


def get_calculate_price_use_case() -> CalculatePriceUseCase:
    return CalculatePriceUseCase(get_unit_of_work_factory())


def get_record_audit_work_item_use_case() -> RecordAuditWorkItemUseCase:
    return RecordAuditWorkItemUseCase(get_audit_log_repository())


def shutdown() -> None:
    """Deja terminar los publish en vuelo y libera los singletons cacheados."""
    get_publish_executor().shutdown(wait=True)
    get_publish_executor.cache_clear()
    get_audit_coordinator.cache_clear()
