from functools import lru_cache

from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """
    Settings for the workflow engine.
    Loaded automatically from the environment (or .env) with prefix FLOWSTEP_*
    """

    log_level: str = "INFO"
    warn_unenforced_timeout: bool = True
    default_workflow_name: str = "anonymous"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "FLOWSTEP_",
        "extra": "ignore",
    }


@lru_cache()
def get_engine_settings() -> EngineSettings:
    """Return cached engine settings."""
    return EngineSettings()
