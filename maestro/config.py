from pathlib import Path

from pydantic_settings import BaseSettings

_HANDLERS_DIR = Path(__file__).resolve().parent / "handlers"


class Settings(BaseSettings):
    # LLM
    llm_provider: str = "auto"
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    llm_api_key: str = ""  # Generic key -- used when provider-specific key is empty
    llm_model: str = "claude-3-5-sonnet-20241022"
    llm_base_url: str = ""  # Custom base URL for openai_compatible provider
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2:3b"
    llm_max_concurrency: int = 3
    llm_timeout_seconds: float = 60.0

    # Run output
    reports_dir: str = "reports"

    # Handlers
    handlers_public_dir: str = str(_HANDLERS_DIR / "public")
    handlers_user_dir: str = str(_HANDLERS_DIR / "user")

    # Version control
    git_enabled: bool = False
    git_base_branch: str = "main"
    git_workdir: str = "."

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
