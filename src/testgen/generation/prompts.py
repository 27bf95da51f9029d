"""Prompt templates for test generation."""

SUMMARY_SYSTEM_PROMPT = """You are a senior test engineer. You read source files and propose \
focused groups of automated tests. You answer with JSON only."""

SUMMARY_PROMPT = """Analyze the following source files and propose test case summaries for the \
{framework} testing framework.

{files_context}

Propose 3-5 summaries that together cover core behaviour, user interactions, state and data flow, \
error handling and edge cases, and integration points where they exist.

Return a JSON array. Each element is an object with exactly these keys:
- "title": short descriptive title
- "description": what the tests verify
- "priority": one of "high", "medium", "low"
- "testCaseCount": number of individual test cases, as a string
- "estimatedTime": estimated run time, as a string (e.g. "2 minutes")
- "files": array of file paths from the list above that the tests cover
- "category": one of "unit", "integration", "e2e", "performance"
"""

CODE_SYSTEM_PROMPT = """You are a senior test engineer. You write complete, runnable test files. \
You answer with the file content only, without commentary."""

CODE_PROMPT = """Write a {framework} test file for this test case summary.

Title: {title}
Description: {description}
Priority: {priority}
Category: {category}
Expected number of test cases: {test_case_count}

Source files:
{files_context}

The file must include all imports and setup, cover every scenario in the description, use \
meaningful test names, assert on observable behaviour, handle async code correctly and clean up \
after itself."""

TEMPLATE_HINT = """

Follow the structure and style of this template:
{template}"""

CUSTOM_PROMPT = """{custom_prompt}

Source files:
{files_context}

Framework: {framework}

Write the complete test file for the requirements above. Answer with the file content only."""

DOCUMENTATION_PROMPT = """Write markdown documentation for a {framework} test suite made of these \
test cases:

{test_cases}

Cover: suite overview, setup and configuration, how to run the tests, expected coverage, \
continuous integration setup and troubleshooting."""


def render_files_context(files) -> str:
    """Concatenate source files as fenced blocks labelled with path and language."""
    return "\n\n".join(
        f"File: {f.path} ({f.language})\n```{f.language}\n{f.content}\n```" for f in files
    )
