"""
Extension to dialect mapping and notebook handling.

Callers that only have a file path use detect_language(); notebooks are
reduced to their concatenated code cells before analysis.
"""

from __future__ import annotations

import json
from pathlib import PurePosixPath

from .dialects import LanguageDialect, resolve_dialect
from .log import get_logger
from .models.results import SourceFile

logger = get_logger('languages')

EXTENSION_MAP: dict[str, LanguageDialect] = {
    '.js': LanguageDialect.JAVASCRIPT,
    '.jsx': LanguageDialect.JAVASCRIPT,
    '.mjs': LanguageDialect.JAVASCRIPT,
    '.cjs': LanguageDialect.JAVASCRIPT,
    '.ts': LanguageDialect.TYPESCRIPT,
    '.tsx': LanguageDialect.TYPESCRIPT,
    '.py': LanguageDialect.PYTHON,
    '.ipynb': LanguageDialect.PYTHON,
    '.colab': LanguageDialect.PYTHON,
    '.go': LanguageDialect.GO,
    '.java': LanguageDialect.JAVA,
    '.c': LanguageDialect.C,
    '.h': LanguageDialect.C,
    '.cpp': LanguageDialect.CPP,
    '.cc': LanguageDialect.CPP,
    '.cxx': LanguageDialect.CPP,
    '.hpp': LanguageDialect.CPP,
    '.hh': LanguageDialect.CPP,
    '.cs': LanguageDialect.CSHARP,
}

NOTEBOOK_EXTENSIONS = frozenset({'.ipynb', '.colab'})


def _extension(path: str) -> str:
    return PurePosixPath(path.replace('\\', '/')).suffix.lower()


def detect_language(path: str) -> LanguageDialect | None:
    """Dialect for a file path by extension (case-insensitive), or None."""
    return EXTENSION_MAP.get(_extension(path))


def is_supported(path: str) -> bool:
    return detect_language(path) is not None


def is_notebook(path: str) -> bool:
    return _extension(path) in NOTEBOOK_EXTENSIONS


def extract_notebook_code(text: str) -> str:
    """Concatenate the code cells of a Jupyter notebook.

    Text that is not valid notebook JSON is returned unchanged so that
    it is still analyzed as plain Python.
    """
    try:
        notebook = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Notebook is not valid JSON (%s); analyzing raw text", exc)
        return text
    if not isinstance(notebook, dict):
        logger.warning("Notebook JSON is not an object; analyzing raw text")
        return text

    chunks = []
    for cell in notebook.get('cells', []):
        if not isinstance(cell, dict) or cell.get('cell_type') != 'code':
            continue
        source = cell.get('source', '')
        chunks.append(''.join(source) if isinstance(source, list) else str(source))
    return '\n\n'.join(chunk.rstrip('\n') for chunk in chunks) + ('\n' if chunks else '')


def resolve_source_language(file: SourceFile) -> LanguageDialect | None:
    """Explicit language id first, then the extension; None when neither resolves.

    Raises:
        UnsupportedLanguageError: If an explicit language id is unknown
    """
    if file.language_id:
        return resolve_dialect(file.language_id)
    return detect_language(file.file_path or file.file_name)


def prepare_content(file: SourceFile) -> str:
    """The text to analyze: notebook code cells, or the content as given."""
    if is_notebook(file.file_path or file.file_name) or (file.language_id or '').lower() == 'jupyter':
        return extract_notebook_code(file.content)
    return file.content
