"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, a fake TeX toolchain and ready-made renderers.
"""

import shlex
import sys
import pytest
from pathlib import Path
from typing import Generator
from unittest.mock import Mock

from pydantic_settings import SettingsConfigDict

# Import application modules
from latex_renderer.config import settings as settings_module
from latex_renderer.config.settings import Settings
from latex_renderer.core.formula.templater import DEFAULT_TEMPLATES_DIR, Templater
from latex_renderer.core.rendering.png_converter import PngConverter
from latex_renderer.core.rendering.renderer import LatexRenderer

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def fake_tool(script: str) -> str:
    """Command line running one of the fake toolchain scripts."""
    return f"{shlex.quote(sys.executable)} {shlex.quote(str(FIXTURES_DIR / script))}"


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"
    outer_scale: float = 1.0
    primary_timeout: float = 5.0
    svg2png_command_template: str = ""
    png_command_template: str = ""

    model_config = SettingsConfigDict(env_file=".env.test")


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Directory holding render workspaces."""
    return tmp_path / "work"


@pytest.fixture
def test_settings(work_dir: Path) -> TestSettings:
    """Test settings wired to the fake toolchain."""
    return TestSettings(
        tmp_dir=work_dir,
        latex_command=fake_tool("fake_latex.py"),
        svg_command_template=fake_tool("fake_dvisvgm.py") + " {path}",
    )


@pytest.fixture(autouse=True)
def override_settings(test_settings: TestSettings, monkeypatch: pytest.MonkeyPatch) -> Generator[TestSettings, None, None]:
    """Override application settings for testing."""
    monkeypatch.setattr(settings_module, "settings", test_settings)
    yield test_settings


@pytest.fixture
def templater() -> Templater:
    return Templater(DEFAULT_TEMPLATES_DIR)


@pytest.fixture
def diagnostics() -> Mock:
    """Stand-in diagnostic sink recording every log call."""
    return Mock()


@pytest.fixture
def renderer(test_settings: TestSettings, templater: Templater, diagnostics: Mock) -> LatexRenderer:
    """Renderer without any rasterizer configured."""
    return LatexRenderer(settings=test_settings, templater=templater, diagnostics=diagnostics)


@pytest.fixture
def png_converter() -> PngConverter:
    return PngConverter(fake_tool("fake_rsvg.py") + " {path}", timeout=5.0)


@pytest.fixture
def sample_svg() -> str:
    """dvisvgm output with start point (0, 3) and bounding box (0, -2, 10, 6)."""
    return (
        "<?xml version='1.0' encoding='UTF-8'?>\n"
        "<!--start 0 3 -->\n"
        "<!--bbox 0 -2 10 6 -->\n"
        "<svg xmlns='http://www.w3.org/2000/svg'>\n"
        "<g/>\n"
        "</svg>\n"
    )


# Pytest configuration
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on file paths."""
    for item in items:
        # Add markers based on file path
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
