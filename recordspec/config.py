from dataclasses import dataclass

from recordspec.utils.logging import configure_logging

__all__ = ("LoggingConfig", "RecordSpecConfig")

_LOG_FORMAT_STYLES = ("structured", "simple")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class LoggingConfig:
    """Settings passed to :func:`recordspec.utils.logging.configure_logging`."""

    level: str = "INFO"
    format_style: str = "structured"
    log_to_file: "str | None" = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            msg = f"level must be one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        if self.format_style not in _LOG_FORMAT_STYLES:
            msg = f"format_style must be one of {', '.join(_LOG_FORMAT_STYLES)}"
            raise ValueError(msg)

    def apply(self) -> None:
        """Configure the ``recordspec`` logger tree."""
        configure_logging(level=self.level, format_style=self.format_style, log_to_file=self.log_to_file)


@dataclass(slots=True)
class RecordSpecConfig:
    """Behavioral settings shared by builders, scopes and selectors.

    Attributes:
        log_queries: Log every rendered query and its access mode at DEBUG level.
        enforce_owner_thread: Make result caches reject access from threads other
            than the one that opened their execution scope.
        default_field_set: Field set selectors fall back to when no explicit
            default fields are declared.
        logging: Optional logging setup applied when the owning ``RecordSpec`` is created.
    """

    log_queries: bool = False
    enforce_owner_thread: bool = True
    default_field_set: "str | None" = None
    logging: "LoggingConfig | None" = None

    def __post_init__(self) -> None:
        if self.default_field_set is not None and not self.default_field_set.strip():
            msg = "default_field_set must be a non-empty name or None"
            raise ValueError(msg)
