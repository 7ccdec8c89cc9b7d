"""
Centralized settings and path configuration for the checkout tool.

Values come from the project layout, overridable through environment
variables (CHECKOUT_RULES, CHECKOUT_STRICT_REFRESH, CHECKOUT_LOG_LEVEL,
CHECKOUT_LOG_DIR).
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DEFAULT_RULES_FILE = 'pricing.yaml'


def get_project_root() -> Path:
    """Get the project root directory (where pricing.yaml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / DEFAULT_RULES_FILE).exists() or (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def parse_bool(value: Optional[str]) -> bool:
    """Parse a boolean from an environment string."""
    if value is None:
        return False
    return value.strip().lower() in ('true', '1', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Rule source backing every cart
    rules_path: Path

    # Surface refresh failures instead of keeping the last good rules
    strict_refresh: bool = False

    # Logging
    log_level: str = 'INFO'
    log_dir: Optional[Path] = None

    @classmethod
    def load(cls, project_root: Optional[Path] = None, environ: Optional[dict] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        env = os.environ if environ is None else environ

        rules_path = Path(env['CHECKOUT_RULES']) if env.get('CHECKOUT_RULES') else root / DEFAULT_RULES_FILE
        log_dir = Path(env['CHECKOUT_LOG_DIR']) if env.get('CHECKOUT_LOG_DIR') else None

        return cls(
            project_root=root,
            rules_path=rules_path,
            strict_refresh=parse_bool(env.get('CHECKOUT_STRICT_REFRESH')),
            log_level=(env.get('CHECKOUT_LOG_LEVEL') or 'INFO').upper(),
            log_dir=log_dir,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
