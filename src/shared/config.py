"""
Centralized configuration for the Voyager voice routing service.

Secrets are never given code defaults; everything else has a sensible
development default and can be overridden through the environment.
"""
import os
import sys
from dataclasses import dataclass, field
from typing import List

import structlog

logger = structlog.get_logger("shared.config")

NAV_APPS = ("apple", "google", "waze")


def _env_float(name: str, default: str) -> float:
    return float(os.environ.get(name, default))


def _env_int(name: str, default: str) -> int:
    return int(os.environ.get(name, default))


@dataclass
class VoyagerConfig:
    """
    Configuration container with validation.

    Configuration Precedence (highest to lowest):
    1. Environment Variables
    2. Code Defaults (only for non-sensitive values)
    """

    # =========================================================================
    # Credentials - no defaults
    # =========================================================================

    # Remote interpreter key. Missing key disables the interpreter only.
    openai_api_key: str = field(default_factory=lambda: os.environ.get("OPENAI_API_KEY", ""))

    # Places search key. Missing key means searches return nothing.
    google_places_api_key: str = field(default_factory=lambda: os.environ.get("GOOGLE_PLACES_API_KEY", ""))

    # =========================================================================
    # Remote interpreter
    # =========================================================================

    llm_base_url: str = field(default_factory=lambda: os.environ.get("LLM_BASE_URL", "https://api.openai.com/v1"))
    llm_model: str = field(default_factory=lambda: os.environ.get("LLM_MODEL", "gpt-4o-mini"))
    llm_timeout_seconds: float = field(default_factory=lambda: _env_float("LLM_TIMEOUT_SECONDS", "10"))
    llm_circuit_failure_threshold: int = field(default_factory=lambda: _env_int("LLM_CIRCUIT_FAILURE_THRESHOLD", "5"))
    llm_circuit_recovery_seconds: float = field(default_factory=lambda: _env_float("LLM_CIRCUIT_RECOVERY_SECONDS", "30"))

    # =========================================================================
    # Geocoding / search
    # =========================================================================

    nominatim_url: str = field(default_factory=lambda: os.environ.get("NOMINATIM_URL", "https://nominatim.openstreetmap.org"))
    geocoder_user_agent: str = field(default_factory=lambda: os.environ.get("GEOCODER_USER_AGENT", "Voyager/1.0"))
    search_radius_miles: float = field(default_factory=lambda: _env_float("SEARCH_RADIUS_MILES", "25"))
    search_result_limit: int = field(default_factory=lambda: _env_int("SEARCH_RESULT_LIMIT", "10"))
    provider_timeout_seconds: float = field(default_factory=lambda: _env_float("PROVIDER_TIMEOUT_SECONDS", "10"))

    # =========================================================================
    # Voice routing
    # =========================================================================

    debounce_window_seconds: float = field(default_factory=lambda: _env_float("VOICE_DEBOUNCE_SECONDS", "1.5"))
    min_query_length: int = field(default_factory=lambda: _env_int("VOICE_MIN_QUERY_LENGTH", "3"))
    nav_app: str = field(default_factory=lambda: os.environ.get("NAV_APP", "apple").lower())

    # Service
    service_port: int = field(default_factory=lambda: _env_int("VOYAGER_PORT", "8040"))

    @property
    def interpreter_configured(self) -> bool:
        return bool(self.openai_api_key)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of errors.
        Call at service startup to fail fast with clear errors.

        Missing API keys are warnings, not errors: the service still routes
        voice commands through the local search fallback without them.
        """
        errors = []

        if self.nav_app not in NAV_APPS:
            errors.append(
                f"NAV_APP must be one of {', '.join(NAV_APPS)}, got '{self.nav_app}'.\n"
                f"  Set via environment variable: export NAV_APP=apple"
            )

        if self.debounce_window_seconds <= 0:
            errors.append("VOICE_DEBOUNCE_SECONDS must be positive.")

        if self.llm_timeout_seconds <= 0:
            errors.append("LLM_TIMEOUT_SECONDS must be positive.")

        if self.search_radius_miles <= 0:
            errors.append("SEARCH_RADIUS_MILES must be positive.")

        if self.min_query_length < 1:
            errors.append("VOICE_MIN_QUERY_LENGTH must be at least 1.")

        if not self.openai_api_key:
            logger.warning(
                "openai_api_key_missing",
                message="Remote interpretation disabled; voice commands use direct local search.",
            )

        if not self.google_places_api_key:
            logger.warning(
                "google_places_api_key_missing",
                message="Local search will return no results until GOOGLE_PLACES_API_KEY is set.",
            )

        return errors

    def validate_or_exit(self, service_name: str = "voyager"):
        """Validate configuration and exit with clear error if invalid."""
        errors = self.validate()
        if errors:
            print(f"\n{'='*60}", file=sys.stderr)
            print(f"CONFIGURATION ERROR - {service_name} cannot start", file=sys.stderr)
            print(f"{'='*60}\n", file=sys.stderr)
            for i, error in enumerate(errors, 1):
                print(f"{i}. {error}\n", file=sys.stderr)
            print(f"{'='*60}", file=sys.stderr)
            print("Fix the above issues and restart the service.", file=sys.stderr)
            print(f"{'='*60}\n", file=sys.stderr)
            sys.exit(1)


# Singleton instance
config = VoyagerConfig()


def get_config() -> VoyagerConfig:
    """Get the singleton config instance."""
    return config
