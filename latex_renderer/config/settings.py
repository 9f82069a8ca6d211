"""
Application Settings
===================

Renderer settings and environment configuration using Pydantic Settings.
Holds the external toolchain command templates, the output scale and the
typesetting timeout. Supports development, testing, and production environments.
"""

from typing import Optional, List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
import shlex
import tempfile


class Settings(BaseSettings):
    """Main renderer settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="LaTeX Formula Renderer", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode, logs sources and tool output")

    # Storage Configuration
    tmp_dir: Path = Field(
        default=Path(tempfile.gettempdir()) / "latex_renderer",
        description="Directory holding per-request workspaces",
    )
    templates_dir: Optional[Path] = Field(
        default=None, description="Override directory for LaTeX document templates"
    )

    # Toolchain Configuration
    tex_path: str = Field(default="", description="Prefix prepended to TeX binaries, e.g. /usr/bin/")
    latex_command: str = Field(
        default="latex -output-directory={tmp_dir}",
        description="Typesetting command, the workspace source path is appended",
    )
    svg_command_template: str = Field(
        default="dvisvgm {path} -o {path}.svg -n --exact -v0 --relative --zoom={outer_scale}",
        description="DVI to SVG command template",
    )
    svg2png_command_template: str = Field(
        default="rsvg-convert {path} -d 96 -p 96 -b white",
        description="SVG to PNG command template writing to stdout, empty to disable",
    )
    png_command_template: str = Field(
        default="",
        description="Legacy DVI to PNG command template, used when svg2png is disabled",
    )

    # Rendering Configuration
    outer_scale: float = Field(
        default=1.32, gt=0, description="Ratio between dvisvgm internal scale and device units"
    )
    primary_timeout: float = Field(
        default=8.0, gt=0, description="Typesetting timeout in seconds"
    )

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(default=None, description="Directory for rotating log files")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("tmp_dir")
    @classmethod
    def create_directories(cls, v: Path) -> Path:
        """Ensure directories exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def latex_args(self) -> List[str]:
        """Typesetting command as an argument list, without the source path."""
        args = [
            arg.replace("{tmp_dir}", str(self.tmp_dir)) for arg in shlex.split(self.latex_command)
        ]
        if args and self.tex_path:
            args[0] = self.tex_path + args[0]
        return args

    def svg_template(self) -> str:
        """DVI to SVG template with the output scale filled in."""
        return self._with_tex_path(
            self.svg_command_template.replace("{outer_scale}", repr(self.outer_scale))
        )

    def png_template(self) -> Optional[str]:
        """Legacy DVI to PNG template, None when disabled."""
        if not self.png_command_template.strip():
            return None
        return self._with_tex_path(self.png_command_template)

    def svg2png_template(self) -> Optional[str]:
        """SVG to PNG template, None when disabled."""
        if not self.svg2png_command_template.strip():
            return None
        return self.svg2png_command_template

    def _with_tex_path(self, template: str) -> str:
        if not self.tex_path:
            return template
        return self.tex_path + template.lstrip()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="LATEX_RENDERER_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
