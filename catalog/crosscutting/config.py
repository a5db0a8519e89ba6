"""
Name: Application Configuration (Settings)

Responsibilities:
  - Configuración centralizada y tipada con pydantic-settings
  - Validar variables de entorno al arrancar
  - Proveer defaults para el servicio de catálogo y el worker

Collaborators:
  - container.py: lee settings para elegir adaptadores in-memory vs Postgres/RQ
  - worker/worker.py: lee Redis/DB para levantar el worker RQ
  - crosscutting/logger.py: lee nivel y formato de log

Constraints:
  - Vive en infraestructura, NO en domain/application
  - Sin lógica de negocio: solo configuración

Notes:
  - Singleton vía lru_cache
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings cargados desde variables de entorno.

    Attributes:
        database_url: connection string de PostgreSQL
        redis_url: connection string de Redis (colas RQ)
        app_env: entorno (development/test/production)
        log_level: nivel del root logger (default: INFO)
        log_json: logs en JSON (default: True)
        db_pool_min_size / db_pool_max_size: tamaño del pool (2 / 10)
        db_statement_timeout_ms: timeout por statement (default: 30s)
        audit_queue_name: cola RQ de audit work items (default: audit)
        audit_retry_max_attempts: re-entregas del broker si el job falla (5)
        audit_job_timeout_seconds: tiempo máximo de un job (60)
        audit_result_ttl_seconds: TTL del resultado del job en Redis (0)
        audit_publish_workers: threads del publish fire-and-forget (2)
        worker_http_port: puerto de /healthz y /metrics del worker (8001)
        integration_events_queue_name: cola RQ de integration events
        integration_events_channel_prefix: prefijo del canal pub/sub donde
            el worker re-emite cada evento (canal = prefijo.EventType)
    """

    # Requerido (sin default)
    database_url: str

    # Entorno
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Redis
    redis_url: str = ""

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000

    # Audit pipeline
    audit_queue_name: str = "audit"
    audit_retry_max_attempts: int = 5
    audit_job_timeout_seconds: int = 60
    audit_result_ttl_seconds: int = 0
    audit_publish_workers: int = 2

    # Worker
    worker_http_port: int = 8001

    # Integration events
    integration_events_queue_name: str = "integration-events"
    integration_events_channel_prefix: str = "catalog.plates"

    @field_validator("log_level")
    @classmethod
    def log_level_valid(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return level

    @field_validator("db_pool_min_size", "db_pool_max_size")
    @classmethod
    def pool_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("pool sizes must be greater than 0")
        return v

    @field_validator("audit_retry_max_attempts", "audit_result_ttl_seconds")
    @classmethod
    def must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("audit_job_timeout_seconds", "audit_publish_workers")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("integration_events_channel_prefix")
    @classmethod
    def channel_prefix_not_blank(cls, v: str) -> str:
        prefix = (v or "").strip().rstrip(".")
        if not prefix:
            raise ValueError("integration_events_channel_prefix cannot be blank")
        return prefix

    def validate_pool_params(self) -> None:
        """Validación cruzada: min no puede superar max. Se llama explícitamente."""
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must be <= "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing", "ci"}

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignora env vars desconocidas
    )


@lru_cache
def get_settings() -> Settings:
    """
    Singleton de Settings.

    Raises:
        ValidationError: faltan env vars requeridas o son inválidas
    """
    settings = Settings()
    settings.validate_pool_params()
    return settings
