"""Custom exceptions for the font preview system."""

from typing import Any


class FontPreviewError(Exception):
    """Base exception for all font preview errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(FontPreviewError):
    """Exception raised for input validation errors."""


class ConfigurationError(FontPreviewError):
    """Exception raised for configuration errors."""


class ProcessingError(FontPreviewError):
    """Exception raised while ingesting a batch of font files."""


class RenderingError(FontPreviewError):
    """Exception raised by the rendering environment."""


class PartialFailureWarning(UserWarning):
    """Issued when a batch loaded but some of its files could not be parsed."""

    def __init__(self, loaded_count: int, failures: list[str]):
        self.loaded_count = loaded_count
        self.failures = list(failures)
        super().__init__(
            f"Loaded {loaded_count} fonts. Failed to parse: {', '.join(self.failures)}. "
            "They may be corrupted."
        )


# Ingestion errors
class ParseError(ProcessingError):
    """Exception raised when a byte buffer is not a well-formed font."""

    def __init__(self, reason: str, file_name: str | None = None):
        prefix = f"{file_name}: " if file_name else ""
        super().__init__(f"{prefix}not a readable font ({reason})", details=reason)
        self.file_name = file_name
        self.reason = reason


class NoValidFilesError(ValidationError):
    """Exception raised when a batch has no file with a recognized font extension."""

    def __init__(self, extensions: list[str] | tuple[str, ...] = (".ttf", ".otf")):
        listed = " or ".join(extensions)
        super().__init__(f"No valid {listed} font files found in the selected directory.")
        self.extensions = tuple(extensions)


class AllFilesFailedError(ProcessingError):
    """Exception raised when every recognized file of a batch failed to parse."""

    def __init__(self, failures: list[str]):
        self.failures = list(failures)
        super().__init__(
            "Could not parse any fonts. The following files may be corrupted: "
            f"{', '.join(self.failures)}"
        )


class BatchSupersededError(ProcessingError):
    """Exception raised when a newer batch started before this one completed."""

    def __init__(self, batch_token: int, current_token: int):
        super().__init__(f"Batch {batch_token} was superseded by batch {current_token}")
        self.batch_token = batch_token
        self.current_token = current_token


class DuplicateRecordError(ValidationError):
    """Exception raised when a batch carries a repeated record id or render family."""

    def __init__(self, field_name: str, value: str):
        super().__init__(f"Duplicate {field_name} in batch: {value}")


# Resource errors
class ResourceReleasedError(FontPreviewError):
    """Exception raised when a released resource handle is used."""

    def __init__(self, locator: str):
        super().__init__(f"Resource has been released: {locator}")
        self.locator = locator


class SelectionStateError(ValidationError):
    """Exception raised for a selection transition not allowed in the current mode."""

    def __init__(self, operation: str, mode: str):
        super().__init__(f"Cannot {operation} while selection is {mode}")


# Rendering errors
class FontNotRegisteredError(RenderingError):
    """Exception raised when no style rule matches the requested render family."""

    def __init__(self, render_family: str):
        super().__init__(f"No font face registered for family: {render_family}")
        self.render_family = render_family


class StyleBlockDetachedError(RenderingError):
    """Exception raised when a removed style block is updated."""

    def __init__(self):
        super().__init__("Style block has been removed from the rendering environment")


class RecordNotFoundError(ValidationError):
    """Exception raised when a record id is not part of the loaded batch."""

    def __init__(self, record_id: str):
        super().__init__(f"Font not found in loaded batch: {record_id}")
        self.record_id = record_id


class EmptyTextError(ValidationError):
    """Exception raised for empty preview text."""

    def __init__(self):
        super().__init__("Text cannot be empty")


class TextTooLongError(ValidationError):
    """Exception raised for preview text above the length limit."""

    def __init__(self, max_length: int):
        super().__init__(f"Text too long (max {max_length} characters)")


class InvalidPixelSizeError(ValidationError):
    """Exception raised for a pixel size outside the supported range."""

    def __init__(self, size: int, min_size: int, max_size: int):
        super().__init__(f"Pixel size {size} outside supported range {min_size}-{max_size}")


# Configuration errors
class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")
