"""
Render Workspace
================

Uniquely named transient files for a single render request. The workspace
base path doubles as the LaTeX source file; every toolchain artifact is the
base path plus an extension.
"""

from typing import Any, Optional, Tuple
from pathlib import Path
import os
import tempfile

from latex_renderer.config.logging import get_logger

logger = get_logger(__name__)

# "" is the source file itself
ARTIFACT_EXTENSIONS: Tuple[str, ...] = ("", ".log", ".aux", ".dvi", ".svg", ".png")


class Workspace:
    """Transient files owned by exactly one render."""

    def __init__(self, base: Path):
        self.base = base
        self.logger: Any = logger.bind(workspace=base.name)  # structlog.BoundLoggerBase
        self._cleaned = False

    @classmethod
    def allocate(cls, directory: Path) -> "Workspace":
        """Reserve a unique base name in the directory."""
        fd, name = tempfile.mkstemp(dir=str(directory), prefix="tex")
        os.close(fd)
        return cls(Path(name))

    @property
    def source(self) -> Path:
        return self.base

    @property
    def log(self) -> Path:
        return self.artifact(".log")

    @property
    def dvi(self) -> Path:
        return self.artifact(".dvi")

    @property
    def svg(self) -> Path:
        return self.artifact(".svg")

    @property
    def png(self) -> Path:
        return self.artifact(".png")

    def artifact(self, extension: str) -> Path:
        return self.base.with_name(self.base.name + extension)

    def write_source(self, text: str) -> None:
        self.source.write_text(text, encoding="utf-8")

    def read_log(self) -> Optional[str]:
        """Typesetting log content, None if it was never written."""
        try:
            return self.log.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    def cleanup(self) -> None:
        """Delete every artifact this workspace may have produced."""
        if self._cleaned:
            return
        self._cleaned = True

        for extension in ARTIFACT_EXTENSIONS:
            try:
                self.artifact(extension).unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                self.logger.warning("Failed to remove artifact", extension=extension, error=str(e))

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.cleanup()
