"""Configuration module for the response finalizer.

This module provides the FinalizerConfig class for configuring the behavior of
the finalizer: when to skip it, how structured bodies are serialized, which
content type they get and how encoding failures are rendered.

Example:
    Basic usage with defaults:

        >>> config = FinalizerConfig()
        >>> config.content_type
        'application/json; charset=UTF-8'

    Custom configuration:

        >>> config = FinalizerConfig(
        ...     skipper=lambda ctx: ctx.get_header("X-Raw") != "",
        ...     fastest=True,
        ...     error_format="json",
        ... )

    Loading from environment:

        >>> import os
        >>> os.environ['RESPONSE_FINALIZER_FASTEST'] = 'true'
        >>> config = FinalizerConfig.from_env()
        >>> config.fastest
        True
"""

import os
from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from response_finalizer.serializers import Serializer, get_serializer
from response_finalizer.utils.headers import MIME_APPLICATION_JSON

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


class FinalizerConfig(BaseModel):
    """Configuration for the response finalizer.

    Attributes:
        skipper: Predicate called with the response context. When it returns
            True the finalizer only runs the downstream chain. Default None
            (never skip).
        fastest: Serialize structured bodies with orjson instead of the
            standard library encoder. The wire format is the same. Default
            False.
        marshal: Custom serializer turning a value into bytes. Takes
            precedence over ``fastest``. Default None.
        content_type: Content type for structured bodies when none is set.
            Default "application/json; charset=UTF-8".
        error_format: How encoding failures are rendered into the body:
            "text" (``message=...``) or "json" (an error object).
            Default "text".

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    skipper: Callable[[Any], bool] | None = Field(
        default=None,
        description="Predicate deciding whether the finalizer is bypassed",
    )
    fastest: bool = Field(
        default=False,
        description="Use orjson for structured bodies",
    )
    marshal: Callable[[Any], bytes] | None = Field(
        default=None,
        description="Custom serializer for structured bodies",
    )
    content_type: str = Field(
        default=MIME_APPLICATION_JSON,
        description="Content type for structured bodies",
    )
    error_format: Literal["text", "json"] = Field(
        default="text",
        description="Rendering of encoding failures: 'text' or 'json'",
    )

    model_config = {"frozen": True}

    @field_validator("content_type")
    @classmethod
    def validate_content_type(cls, v: str) -> str:
        """Validate the content type is not blank.

        Raises:
            ValueError: If the content type is empty or whitespace.
        """
        v = v.strip()
        if not v:
            raise ValueError("content_type must not be empty")
        return v

    @field_validator("fastest", mode="before")
    @classmethod
    def validate_fastest(cls, v: Any) -> Any:
        """Accept common string spellings of booleans (from environment variables)."""
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise ValueError(f"fastest must be a boolean, got {v!r}")
        return v

    def resolve_serializer(self) -> Serializer:
        """Return the serializer for structured bodies.

        A custom ``marshal`` wins; otherwise orjson when ``fastest`` is set,
        the standard library encoder otherwise.
        """
        if self.marshal is not None:
            return self.marshal
        return get_serializer(self.fastest)

    def should_skip(self, ctx: Any) -> bool:
        """Evaluate the skip predicate for a context."""
        return self.skipper is not None and bool(self.skipper(ctx))

    @classmethod
    def from_env(cls, prefix: str = "RESPONSE_FINALIZER_") -> "FinalizerConfig":
        """Create configuration from environment variables.

        Only the plain-value settings are read: ``FASTEST``, ``CONTENT_TYPE``
        and ``ERROR_FORMAT``. Callables cannot come from the environment.

        Args:
            prefix: Prefix for environment variable names.

        Returns:
            FinalizerConfig populated from the environment. Missing variables
            use the defaults.
        """
        config_dict: dict[str, Any] = {}

        for field_name in ("fastest", "content_type", "error_format"):
            env_value = os.environ.get(f"{prefix}{field_name.upper()}")
            if env_value is not None:
                config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "FinalizerConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)
