"""Pytest configuration and fixtures for RouteDoc tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from routedoc.models import ParsedFile
from routedoc.parser import JavaScriptParser


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path: Path):
    """Keep tests from picking up a routedoc.toml in the working directory."""
    monkeypatch.setattr("routedoc.config.CONFIG_FILE", tmp_path / "missing" / "routedoc.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def routes_dir() -> Path:
    """Get path to the sample route modules."""
    return Path(__file__).parent / "fixtures" / "routes"


@pytest.fixture(scope="session")
def js_parser() -> JavaScriptParser:
    return JavaScriptParser()


@pytest.fixture
def parse_js(js_parser: JavaScriptParser) -> Callable[[str], ParsedFile]:
    """Parse a JavaScript snippet as if it were ``routes/test.js``."""

    def _parse(source: str) -> ParsedFile:
        path = Path("routes") / "test.js"
        return ParsedFile(path=path, source=source, tree=js_parser.parse(source, path))

    return _parse


@pytest.fixture
def write_routes(temp_dir: Path) -> Callable[..., Path]:
    """Write ``name -> source`` pairs into a fresh routes directory."""

    def _write(**files: str) -> Path:
        directory = temp_dir / "routes"
        directory.mkdir(parents=True, exist_ok=True)
        for name, source in files.items():
            (directory / f"{name}.js").write_text(source, encoding="utf-8")
        return directory

    return _write
