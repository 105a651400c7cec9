"""Configuration module for zotlink."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

from zotlink.exceptions import ConfigurationError, ErrorCode

# Load a .env from the working directory, then the user-level one.
# Values already present in the process environment are never overridden.
load_dotenv(Path.cwd() / ".env")

_USER_ENV = Path.home() / ".zotlink" / ".env"
load_dotenv(_USER_ENV)


logger = logging.getLogger(__name__)

LINK_TEMPLATE = "[Open in Zotero](zotero://open-pdf/library/items/{item_id})"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class LinkerConfig(BaseModel):
    """Configuration for a zotlink run."""

    # Directory receiving the per-run log file
    log_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("ZOTLINK_LOG_DIR", "."))
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("ZOTLINK_LOG_LEVEL", "INFO").upper()
    )
    # Substring on the link line that marks a note as already linked
    link_marker: str = Field(
        default_factory=lambda: os.getenv("ZOTLINK_LINK_MARKER", "zotero")
    )
    # 1-based line number the link is inserted at
    link_line: int = Field(
        default_factory=lambda: os.getenv("ZOTLINK_LINK_LINE", "6"),
        validate_default=True,
    )
    # Normalize the PDF corpus once per run instead of once per note
    cache_pdf_tokens: bool = Field(
        default_factory=lambda: _env_flag("ZOTLINK_CACHE_PDF_TOKENS", "true")
    )
    # Ignore notes below dot-directories such as .obsidian/ or .trash/
    skip_hidden: bool = Field(
        default_factory=lambda: _env_flag("ZOTLINK_SKIP_HIDDEN", "false")
    )
    note_suffix: str = Field(default=".md")
    pdf_suffix: str = Field(default=".pdf")
    link_template: str = Field(default=LINK_TEMPLATE)

    @model_validator(mode="after")
    def _validate_link_settings(self) -> "LinkerConfig":
        """Reject settings that would make link detection meaningless."""
        if self.link_line < 1:
            raise ValueError("link_line must be >= 1")
        if not self.link_marker:
            raise ValueError("link_marker cannot be empty")
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            logger.warning(
                "Unknown log level %r, falling back to INFO", self.log_level
            )
            self.log_level = "INFO"
        return self

    def format_link(self, item_id: str) -> str:
        """Build the link line for a Zotero item, keeping the id verbatim."""
        return self.link_template.format(item_id=item_id)

    @property
    def link_prefix(self) -> str:
        """Text every generated link line starts with."""
        return self.link_template.split("{item_id}")[0]


def load_config() -> LinkerConfig:
    """Build settings from the environment.

    Raises:
        ConfigurationError: If a ``ZOTLINK_*`` value is malformed.
    """
    try:
        return LinkerConfig()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.errors()[0]['msg']}",
            code=ErrorCode.CONFIG_INVALID,
        ) from e
