"""
Client settings and configuration.

Values come from the environment (a local ``.env`` file is loaded
first) and act as defaults for explicit constructor arguments.
"""

import os
from typing import Optional, Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_API_URL = 'https://api.pipedrive.com/v1'


class Settings:
    """
    Client settings.

    Centralizes all configuration values.
    """

    def __init__(self):
        """Initialize settings from environment and defaults."""
        # API Settings
        self.api_token = os.getenv('PIPEDRIVE_API_TOKEN')
        self.api_url = os.getenv('PIPEDRIVE_URL', DEFAULT_API_URL)
        self.request_timeout = float(os.getenv('REQUEST_TIMEOUT', '30.0'))

        # Rate limit handling
        self.rate_limit_retries = int(os.getenv('RATE_LIMIT_RETRIES', '3'))
        self.rate_limit_backoff = int(os.getenv('RATE_LIMIT_BACKOFF', '5'))

        # Observability
        self.enable_metrics = os.getenv('ENABLE_METRICS', 'true').lower() == 'true'
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self

        for k in keys:
            if hasattr(value, k):
                value = getattr(value, k)
            else:
                return default

        return value if value is not None else default

    def validate(self) -> bool:
        """
        Validate that required settings are present.

        Returns:
            True if valid, False otherwise
        """
        if not self.api_token or not self.api_url:
            return False

        if self.rate_limit_retries < 0 or self.rate_limit_backoff < 0:
            return False

        return self.request_timeout > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary (excluding the API token)."""
        return {
            'api_url': self.api_url,
            'request_timeout': self.request_timeout,
            'rate_limit_retries': self.rate_limit_retries,
            'rate_limit_backoff': self.rate_limit_backoff,
            'enable_metrics': self.enable_metrics,
            'log_level': self.log_level,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Optional[Settings]):
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
