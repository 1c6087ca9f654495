"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class LLMConfig(BaseModel):
    """Alternate (LLM) planner configuration."""

    enabled: bool = Field(default=False, alias="USE_LLM", description="Consult the LLM planner for ambiguous goals")
    model: str = Field(default="mistral:latest", alias="LLM_MODEL", description="Model name passed to the backend")
    provider: Literal["ollama", "pydantic_ai"] = Field(
        default="ollama", alias="LLM_PROVIDER", description="LLM backend (ollama or pydantic_ai)"
    )
    base_url: str = Field(
        default="http://localhost:11434", alias="OLLAMA_BASE_URL", description="Ollama HTTP API base URL"
    )
    timeout: float = Field(default=30.0, alias="LLM_TIMEOUT_SECONDS", description="Generation request timeout")
    connect_timeout: float = Field(
        default=5.0, alias="LLM_CONNECT_TIMEOUT_SECONDS", description="Connectivity check timeout"
    )
    connect_retries: int = Field(default=3, alias="LLM_CONNECT_RETRIES", description="Connectivity check attempts")
    connect_backoff: float = Field(
        default=1.0, alias="LLM_CONNECT_BACKOFF_SECONDS", description="Initial delay between attempts, doubled each time"
    )

    model_config = {"populate_by_name": True}


class SequencerConfig(BaseModel):
    """Task sequencer timing and failure policy."""

    settle_delay_after_navigate: float = Field(
        default=2.0, alias="SETTLE_DELAY_AFTER_NAVIGATE_SECONDS", description="Delay before the step after a navigate"
    )
    settle_delay: float = Field(default=0.5, alias="SETTLE_DELAY_SECONDS", description="Delay before any other step")
    task_ttl: float = Field(default=600.0, alias="TASK_TTL_SECONDS", description="Task lifetime, 0 disables expiry")
    reaper_interval: float = Field(
        default=30.0, alias="TASK_REAPER_INTERVAL_SECONDS", description="How often expired tasks are reaped"
    )
    max_consecutive_failures: Optional[int] = Field(
        default=None, alias="MAX_CONSECUTIVE_FAILURES", description="Fail a task after this many failed steps in a row"
    )
    legacy_outcome_routing: bool = Field(
        default=True, alias="LEGACY_OUTCOME_ROUTING", description="Route outcomes without taskId to the active task"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Cortex Relay Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Relay server host address to bind to",
        alias="CORTEX_RELAY_SERVER_HOST",
    )
    server_port: int = Field(
        default=8080,
        description="Relay server port number",
        alias="CORTEX_RELAY_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Relay server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="CORTEX_RELAY_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="CORTEX_RELAY_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the rotating log file",
        alias="CORTEX_RELAY_LOG_FILE_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to <log_file_dir>/cortex_relay.log",
        alias="CORTEX_RELAY_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # LLM Planner Configuration
    # =====================================================================
    use_llm: bool = Field(default=False, description="Enable the LLM planner", alias="USE_LLM")
    llm_model: str = Field(default="mistral:latest", description="LLM model name", alias="LLM_MODEL")
    llm_provider: Literal["ollama", "pydantic_ai"] = Field(
        default="ollama", description="LLM backend", alias="LLM_PROVIDER"
    )
    ollama_base_url: str = Field(
        default="http://localhost:11434", description="Ollama HTTP API base URL", alias="OLLAMA_BASE_URL"
    )
    llm_timeout_seconds: float = Field(default=30.0, alias="LLM_TIMEOUT_SECONDS")
    llm_connect_timeout_seconds: float = Field(default=5.0, alias="LLM_CONNECT_TIMEOUT_SECONDS")
    llm_connect_retries: int = Field(default=3, ge=1, alias="LLM_CONNECT_RETRIES")
    llm_connect_backoff_seconds: float = Field(default=1.0, ge=0, alias="LLM_CONNECT_BACKOFF_SECONDS")

    # =====================================================================
    # Sequencer Configuration
    # =====================================================================
    settle_delay_after_navigate_seconds: float = Field(default=2.0, ge=0, alias="SETTLE_DELAY_AFTER_NAVIGATE_SECONDS")
    settle_delay_seconds: float = Field(default=0.5, ge=0, alias="SETTLE_DELAY_SECONDS")
    task_ttl_seconds: float = Field(default=600.0, ge=0, alias="TASK_TTL_SECONDS")
    task_reaper_interval_seconds: float = Field(default=30.0, gt=0, alias="TASK_REAPER_INTERVAL_SECONDS")
    max_consecutive_failures: Optional[int] = Field(default=None, ge=1, alias="MAX_CONSECUTIVE_FAILURES")
    legacy_outcome_routing: bool = Field(default=True, alias="LEGACY_OUTCOME_ROUTING")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def llm(self) -> LLMConfig:
        """Get LLM planner configuration."""
        return LLMConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def sequencer(self) -> SequencerConfig:
        """Get task sequencer configuration."""
        return SequencerConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
