"""
Application configuration
Process settings come from the environment; the provider itself only sees ServeConfig
"""
import json
import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from spaweb.core.exceptions import ConfigurationError

load_dotenv()


class ServeConfig(BaseModel):
    """Directory and mount prefix handed to the web provider"""
    model_config = ConfigDict(frozen=True)

    root_directory: Path = Field(..., description="Directory holding the compiled frontend bundle")
    mount_prefix: str = Field("/", description="URL prefix the provider is mounted under")
    client_config: Dict[str, Any] = Field(
        default_factory=dict,
        description="Extra keys published to the frontend next to basePath"
    )


class Settings:
    """Application settings - simple Python class"""

    # Application
    APP_NAME: str = os.getenv("APP_NAME", "SPA Web Provider")
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Web bundle
    WEB_DIRECTORY: str = os.getenv("WEB_DIRECTORY", "./frontend/dist")
    WEB_PREFIX: str = os.getenv("WEB_PREFIX", "/")
    WEB_CACHE_MAX_AGE: int = int(os.getenv("WEB_CACHE_MAX_AGE", "0"))
    WEB_CLIENT_CONFIG: str = os.getenv("WEB_CLIENT_CONFIG", "")

    def get_client_config(self) -> Dict[str, Any]:
        """Parse WEB_CLIENT_CONFIG as a JSON object"""
        raw = self.WEB_CLIENT_CONFIG.strip()
        if not raw:
            return {}
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise ConfigurationError(
                "WEB_CLIENT_CONFIG is not valid JSON",
                details={"reason": str(e)}
            ) from e
        if not isinstance(value, dict):
            raise ConfigurationError("WEB_CLIENT_CONFIG must be a JSON object")
        return value

    def get_serve_config(self) -> ServeConfig:
        return ServeConfig(
            root_directory=Path(self.WEB_DIRECTORY),
            mount_prefix=self.WEB_PREFIX,
            client_config=self.get_client_config(),
        )


settings = Settings()
