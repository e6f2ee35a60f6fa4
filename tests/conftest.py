from pathlib import Path
from typing import Dict

import pytest

from tildetpl import MappingReader
from tests.infrastructure.file_utils import write


@pytest.fixture
def files() -> Dict[str, str]:
    """In-memory include sources; tests add entries before parsing."""
    return {}


@pytest.fixture
def reader(files):
    """Read capability over the `files` fixture."""
    return MappingReader(files)


@pytest.fixture
def tmptpl(tmp_path: Path):
    """Small template tree on disk: a root template, a partial and a pattern file."""
    root = tmp_path
    write(root / "main.tpl", "Hello {~ $name! ~}\n{~ @include partials/footer.tpl ~}")
    write(root / "partials" / "footer.tpl", "-- {~ $signature? ~}\n")
    write(
        root / "list.tpl",
        "<ul>\n{~ @pattern item ~}<li>{~ $text ~}</li>\n{~ @end-pattern ~}</ul>\n",
    )
    return root
