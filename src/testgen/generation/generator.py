"""Content generation: test-case summaries and test code from an LLM.

How to use:
    from testgen.generation import ContentGenerator, SourceFile

    generator = ContentGenerator(llm_provider)
    summaries = await generator.generate_summaries(files, "Pytest")
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from testgen.core.frameworks import build_test_filename
from testgen.entities import GeneratedTestCode, ProposedTestCase, TestCaseSummary
from testgen.generation import prompts
from testgen.observability.logging import get_logger
from testgen.providers.base import LLMProvider, ProviderError

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """A file as sent to the LLM."""

    path: str
    language: str
    content: str


def strip_code_fences(text: str) -> str:
    """Remove a single surrounding ``` fence (with optional language tag)."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped

    lines = stripped.split("\n")
    body = lines[1:]
    if body and body[-1].strip() == "```":
        body = body[:-1]
    return "\n".join(body).strip()


def parse_summaries(text: str, provider: str = "llm") -> list[ProposedTestCase]:
    """Parse the LLM's JSON answer into proposed summaries.

    Accepts a bare array, or an object wrapping one array. Elements that fail
    validation are dropped.

    Raises:
        ProviderError: If nothing usable can be parsed
    """
    try:
        data: Any = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ProviderError(
            message=f"Failed to parse test case summaries: {e.msg}",
            provider=provider,
            original_error=e,
        ) from e

    if isinstance(data, dict):
        arrays = [v for v in data.values() if isinstance(v, list)]
        data = arrays[0] if arrays else [data]

    if not isinstance(data, list):
        raise ProviderError(message="Failed to generate test case summaries: expected a JSON array", provider=provider)

    summaries = []
    for index, item in enumerate(data):
        try:
            summaries.append(ProposedTestCase.model_validate(item))
        except ValidationError as e:
            logger.warning("summary_discarded", index=index, errors=e.error_count())

    if not summaries:
        raise ProviderError(message="Failed to generate test case summaries: empty response", provider=provider)
    return summaries


class ContentGenerator:
    """Turns source files into test-case summaries and test code."""

    def __init__(
        self,
        provider: LLMProvider,
        code_model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: float = 0.2,
    ):
        """Initialize the generator.

        Args:
            provider: LLM backend
            code_model: Model override for code generation calls
            max_tokens: Completion limit passed to every call
            temperature: Sampling temperature passed to every call
        """
        self.provider = provider
        self.code_model = code_model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def _provider_name(self) -> str:
        return self.provider.config.provider_type

    async def generate_summaries(self, files: list[SourceFile], framework: str) -> list[ProposedTestCase]:
        """Propose test-case summaries for ``files``.

        Each summary's ``files`` is restricted to the supplied paths; a summary
        that names none of them is attributed to all of them.
        """
        prompt = prompts.SUMMARY_PROMPT.format(
            framework=framework,
            files_context=prompts.render_files_context(files),
        )
        logger.info("summary_generation_started", file_count=len(files), framework=framework)

        text = await self.provider.generate(
            prompt,
            system_prompt=prompts.SUMMARY_SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            json_output=True,
        )
        summaries = parse_summaries(text, provider=self._provider_name)

        supplied = [f.path for f in files]
        allowed = set(supplied)
        for summary in summaries:
            kept = [path for path in summary.files if path in allowed]
            summary.files = kept or list(supplied)

        logger.info("summary_generation_completed", summary_count=len(summaries))
        return summaries

    async def generate_test_code(
        self,
        summary: TestCaseSummary,
        files: list[SourceFile],
        template: Optional[str] = None,
    ) -> GeneratedTestCode:
        """Write the test file for one stored summary."""
        framework = summary.test_framework
        relevant = [f for f in files if f.path in summary.files] or files

        prompt = prompts.CODE_PROMPT.format(
            framework=framework,
            title=summary.title,
            description=summary.description,
            priority=summary.priority,
            category=summary.category,
            test_case_count=summary.test_case_count,
            files_context=prompts.render_files_context(relevant),
        )
        if template:
            prompt += prompts.TEMPLATE_HINT.format(template=template)

        text = await self.provider.generate(
            prompt,
            system_prompt=prompts.CODE_SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            model=self.code_model,
        )
        code = strip_code_fences(text)
        if not code:
            raise ProviderError(message="Failed to generate test code: empty response", provider=self._provider_name)

        return GeneratedTestCode(
            filename=build_test_filename(summary.files, framework, summary.category),
            content=code,
            framework=framework,
            language=relevant[0].language if relevant else "javascript",
            category=summary.category,
        )

    async def generate_custom_test(
        self, custom_prompt: str, files: list[SourceFile], framework: str
    ) -> GeneratedTestCode:
        """Write a test file from a free-form user prompt."""
        prompt = prompts.CUSTOM_PROMPT.format(
            custom_prompt=custom_prompt,
            files_context=prompts.render_files_context(files),
            framework=framework,
        )
        text = await self.provider.generate(
            prompt,
            system_prompt=prompts.CODE_SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            model=self.code_model,
        )
        code = strip_code_fences(text)
        if not code:
            raise ProviderError(
                message="Failed to generate custom test code: empty response", provider=self._provider_name
            )

        return GeneratedTestCode(
            filename=build_test_filename([f.path for f in files][:1] or ["custom"], framework),
            content=code,
            framework=framework,
            language=files[0].language if files else "javascript",
        )

    async def generate_documentation(self, summaries: list[TestCaseSummary], framework: str) -> str:
        """Markdown documentation for a set of summaries."""
        test_cases = "\n".join(f"- {s.title}: {s.description}" for s in summaries)
        text = await self.provider.generate(
            prompts.DOCUMENTATION_PROMPT.format(framework=framework, test_cases=test_cases),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        return text.strip()
