"""Shared file-type tables.

One table drives three decisions so they cannot drift apart:
- which remote files the sync accepts (extension allow-list)
- which language tag a stored file gets
- which stored files batch generation treats as code
"""

from collections.abc import Iterable
from pathlib import PurePosixPath

# extension (lowercase, no dot) -> language tag
EXTENSION_LANGUAGES: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "java": "java",
    "kt": "kotlin",
    "scala": "scala",
    "cpp": "cpp",
    "c": "c",
    "h": "c",
    "cs": "csharp",
    "go": "go",
    "rs": "rust",
    "php": "php",
    "rb": "ruby",
    "swift": "swift",
    "sh": "shell",
    "bat": "batch",
    "html": "html",
    "css": "css",
    "scss": "scss",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "md": "markdown",
    "txt": "text",
}

SYNC_EXTENSIONS: frozenset[str] = frozenset(EXTENSION_LANGUAGES)

# Languages that batch generation writes tests for; markup, styles, data and
# scripts are excluded.
PROGRAMMING_LANGUAGES: frozenset[str] = frozenset(
    {
        "javascript",
        "typescript",
        "python",
        "java",
        "kotlin",
        "scala",
        "cpp",
        "c",
        "csharp",
        "go",
        "rust",
        "php",
        "ruby",
        "swift",
    }
)

DEFAULT_SKIP_DIRS: tuple[str, ...] = ("node_modules",)

FALLBACK_LANGUAGE = "text"


def extension_of(filename: str) -> str:
    """Lowercase extension without the dot, or '' when there is none."""
    suffix = PurePosixPath(filename).suffix
    return suffix[1:].lower() if suffix else ""


def language_for(filename: str) -> str:
    """Language tag for a file name; 'text' for unknown extensions."""
    return EXTENSION_LANGUAGES.get(extension_of(filename), FALLBACK_LANGUAGE)


def is_allowed_extension(filename: str) -> bool:
    return extension_of(filename) in SYNC_EXTENSIONS


def is_skipped_dir(name: str, skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS) -> bool:
    """Hidden directories (.git, .github, ...) and dependency directories are never walked."""
    return name.startswith(".") or name in set(skip_dirs)


def path_traverses_skipped_dir(path: str, skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS) -> bool:
    """True if any directory component of a repo-relative path is skipped."""
    skip = set(skip_dirs)
    parts = PurePosixPath(path).parts[:-1]
    return any(is_skipped_dir(part, skip) for part in parts)


def is_programming_language(language: str | None) -> bool:
    return bool(language) and language.lower() in PROGRAMMING_LANGUAGES
