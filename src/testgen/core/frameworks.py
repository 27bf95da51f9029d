"""Per-framework conventions: test file naming, target directory, run command."""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional


@dataclass(frozen=True)
class FrameworkConvention:
    """Where and how tests for one framework live in a repository."""

    label: str
    extension: str
    test_dir: str
    test_command: str
    e2e_extension: Optional[str] = None

    def extension_for(self, category: Optional[str]) -> str:
        if category == "e2e" and self.e2e_extension:
            return self.e2e_extension
        return self.extension


_JEST = FrameworkConvention("Jest", "test.js", "__tests__", "npm test", e2e_extension="e2e.test.js")

CONVENTIONS: dict[str, FrameworkConvention] = {
    "Jest": _JEST,
    "Jest (React)": FrameworkConvention(
        "Jest (React)", "test.js", "__tests__", "npm test", e2e_extension="e2e.test.js"
    ),
    "Cypress": FrameworkConvention("Cypress", "cy.js", "cypress/e2e", "npx cypress run"),
    "Selenium": FrameworkConvention("Selenium", "selenium.test.js", "tests/selenium", "npm run test:selenium"),
    "Playwright": FrameworkConvention("Playwright", "spec.js", "tests/playwright", "npx playwright test"),
    "Pytest": FrameworkConvention("Pytest", "test.py", "tests", "pytest"),
    "JUnit": FrameworkConvention("JUnit", "Test.java", "src/test/java", "mvn test"),
    "Mocha": FrameworkConvention("Mocha", "test.js", "test", "npm run test"),
}

# Checked in order; "jest" last so labels like "Jest (React)" already matched exactly.
_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("pytest", "Pytest"),
    ("junit", "JUnit"),
    ("cypress", "Cypress"),
    ("playwright", "Playwright"),
    ("selenium", "Selenium"),
    ("mocha", "Mocha"),
    ("jest", "Jest"),
)

DEFAULT_CONVENTION = FrameworkConvention("default", "test.js", "tests", "npm test")


def convention_for(framework: str) -> FrameworkConvention:
    """Resolve a framework label, exact match first, then by keyword."""
    if framework in CONVENTIONS:
        return CONVENTIONS[framework]

    lowered = (framework or "").lower()
    for keyword, label in _KEYWORDS:
        if keyword in lowered:
            return CONVENTIONS[label]
    return DEFAULT_CONVENTION


def build_test_filename(files: list[str], framework: str, category: Optional[str] = None) -> str:
    """Name of the generated test file.

    Uses the basename of the first referenced file up to its first dot, e.g.
    ``app/calc.py`` + Pytest -> ``calc.test.py``.
    """
    first = files[0] if files else "component"
    base = PurePosixPath(first).name.split(".")[0] or "test"
    return f"{base}.{convention_for(framework).extension_for(category)}"


def build_test_path(filename: str, framework: str) -> str:
    """Repo-relative path a generated test file is committed to."""
    return f"{convention_for(framework).test_dir}/{filename}"


def framework_slug(framework: str) -> str:
    """Branch-safe form of a framework label: 'Jest (React)' -> 'jest-react'."""
    cleaned = "".join(ch if ch.isalnum() else "-" for ch in framework.lower())
    return "-".join(part for part in cleaned.split("-") if part) or "tests"
