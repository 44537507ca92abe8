"""Configuration for the scriptable XML tree parser.

:class:`ParserConfig` is an immutable value object: one instance can be
shared by any number of concurrent parses.
"""

import json
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class TokenizerBackend(Enum):
    """Tokenizer implementations that can drive the tree builder."""

    EXPAT = "expat"     # Standard library xml.parsers.expat
    LXML = "lxml"       # lxml.etree target parser

    @classmethod
    def parse(cls, value: Any) -> "TokenizerBackend":
        """Resolve a backend from an enum member, its name, or its value.

        Raises:
            ConfigValidationError: If ``value`` names no known backend
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.lower() in (member.value, member.name.lower()):
                    return member
        raise ConfigValidationError(
            f"Unknown tokenizer backend: {value!r}",
            field_name="tokenizer",
            suggestions=[member.value for member in cls],
        )


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for one or many calls to the parse orchestrator.

    Attributes:
        tokenizer: Which tokenizer backend emits the parse events
        check_end_names: Record a structural error when an end-element event
            names a different element than the innermost open one
        correlation_id: Correlation ID attached to log records and diagnostics
        log_diagnostics: Log tokenizer and structural errors at WARNING level
        name: Optional preset name
    """

    tokenizer: TokenizerBackend = TokenizerBackend.EXPAT
    check_end_names: bool = True
    correlation_id: Optional[str] = None
    log_diagnostics: bool = True
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the parser configuration."""
        if not isinstance(self.tokenizer, TokenizerBackend):
            raise ConfigValidationError(
                f"tokenizer must be a TokenizerBackend, got {type(self.tokenizer).__name__}",
                field_name="tokenizer",
                suggestions=[member.value for member in TokenizerBackend],
            )
        for flag in ("check_end_names", "log_diagnostics"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigValidationError(f"{flag} must be a bool", field_name=flag)
        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ConfigValidationError(
                "correlation_id must be a string or None", field_name="correlation_id"
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig().override(tokenizer="lxml")
            >>> config.tokenizer
            <TokenizerBackend.LXML: 'lxml'>
        """
        unknown = set(kwargs) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(sorted(unknown))}",
                field_name=sorted(unknown)[0],
            )
        if "tokenizer" in kwargs:
            kwargs["tokenizer"] = TokenizerBackend.parse(kwargs["tokenizer"])
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.value if isinstance(value, Enum) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Missing keys keep their defaults; unknown keys are rejected.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a JSON object")
        return cls().override(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset that rejects any end-element event not matching its start."""
        return cls(check_end_names=True, name="strict")

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Preset that trusts the tokenizer to pair start and end events."""
        return cls(check_end_names=False, name="lenient")
