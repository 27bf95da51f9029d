"""Entities - Domain models for the test generation pipeline.

This module contains pure domain entities without business logic:
- Repository: A GitHub repository known to the service
- RepositoryFile: A synced file (metadata, lazily loaded content, selection)
- TestCaseSummary: A proposed group of tests, optionally with generated code
- TestTemplate: A framework skeleton used as a generation hint
"""

from testgen.entities.repository import Repository
from testgen.entities.repository_file import FileType, RemoteEntry, RepositoryFile
from testgen.entities.template import TestTemplate
from testgen.entities.test_case import (
    GeneratedTestCode,
    Priority,
    ProposedTestCase,
    TestCaseSummary,
    TestCategory,
)

__all__ = [
    "FileType",
    "GeneratedTestCode",
    "Priority",
    "ProposedTestCase",
    "RemoteEntry",
    "Repository",
    "RepositoryFile",
    "TestCaseSummary",
    "TestCategory",
    "TestTemplate",
]
