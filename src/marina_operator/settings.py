"""Centralized operator settings using pydantic-settings.

This module provides a single source of truth for all operator configuration
loaded from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Operator configuration loaded from environment variables.

    All settings have sensible defaults for production use. Override via
    environment variables as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )

    handler_entry_log_level: str = Field(
        default="INFO",
        validation_alias="HANDLER_ENTRY_LOG_LEVEL",
        description="Log level for the line emitted when a kopf handler is invoked",
    )

    # Namespace watching
    namespaces: str = Field(
        default="",
        validation_alias="MARINA_OPERATOR_NAMESPACES",
        description="Comma-separated list of namespaces to watch (empty = all namespaces)",
    )

    # Reconciliation behavior
    retry_delay_seconds: int = Field(
        default=30,
        validation_alias="RETRY_DELAY_SECONDS",
        description="Delay before kopf retries a failed reconciliation pass",
    )
    max_workers: int = Field(
        default=20,
        validation_alias="MAX_WORKERS",
        description="Maximum number of concurrently running kopf handlers",
    )
    watch_owned_resources: bool = Field(
        default=True,
        validation_alias="WATCH_OWNED_RESOURCES",
        description="Reconcile the owner when a derived object changes",
    )

    # Peering for leader election
    peering_name: str = Field(
        default="marina-operator",
        validation_alias="PEERING_NAME",
        description="Name of the kopf peering object used for leader election",
    )

    @property
    def watched_namespaces(self) -> list[str] | None:
        """Parse watched namespaces from comma-separated string.

        Returns:
            List of namespace names, or None to watch all namespaces
        """
        if self.namespaces:
            return [ns.strip() for ns in self.namespaces.split(",") if ns.strip()]
        return None


# Global settings instance - initialized once at module import
settings = Settings()
