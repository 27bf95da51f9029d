"""Unit tests for ContentGenerator and its parsing helpers."""

import json

import pytest

from testgen.entities import TestCaseSummary
from testgen.generation import ContentGenerator, SourceFile, parse_summaries, strip_code_fences
from testgen.providers.base import ProviderError

from tests.fakes import FakeLLMProvider, summaries_json

CALC = SourceFile(path="app/calc.py", language="python", content="def add(a, b):\n    return a + b\n")
UTIL = SourceFile(path="app/util.py", language="python", content="def noop():\n    pass\n")


class TestStripCodeFences:
    def test_fenced_with_language(self):
        assert strip_code_fences("```python\nx = 1\n```") == "x = 1"

    def test_fenced_without_closing(self):
        assert strip_code_fences("```js\nconst a = 1;") == "const a = 1;"

    def test_plain_text_untouched(self):
        assert strip_code_fences("  x = 1\n") == "x = 1"


class TestParseSummaries:
    """Test lenient parsing of the LLM's summary answer."""

    def test_bare_array(self):
        summaries = parse_summaries(summaries_json("a.py", count=3))

        assert len(summaries) == 3
        assert summaries[0].files == ["a.py"]

    def test_wrapped_array(self):
        text = json.dumps({"testCases": json.loads(summaries_json("a.py", count=2))})

        assert len(parse_summaries(text)) == 2

    def test_fenced_json(self):
        assert len(parse_summaries(f"```json\n{summaries_json('a.py')}\n```")) == 1

    def test_normalizes_fields(self):
        text = json.dumps(
            [
                {
                    "title": "T",
                    "description": "D",
                    "priority": "urgent",
                    "testCaseCount": 4,
                    "estimatedTime": 5,
                    "category": "End-to-End",
                }
            ]
        )

        summary = parse_summaries(text)[0]

        assert summary.priority == "medium"
        assert summary.category == "e2e"
        assert summary.test_case_count == "4"
        assert summary.estimated_time == "5"

    def test_invalid_items_dropped(self):
        text = json.dumps([{"title": "", "description": "D"}, {"title": "Ok", "description": "D"}])

        assert [s.title for s in parse_summaries(text)] == ["Ok"]

    @pytest.mark.parametrize("text", ["not json", "[]", "42", '[{"title": ""}]'])
    def test_unusable_answers(self, text):
        with pytest.raises(ProviderError):
            parse_summaries(text)


@pytest.mark.asyncio
class TestContentGenerator:
    """Test prompt assembly and result shaping."""

    async def test_summaries_restricted_to_supplied_files(self):
        llm = FakeLLMProvider([summaries_json("app/calc.py", "app/other.py")])
        generator = ContentGenerator(llm)

        summaries = await generator.generate_summaries([CALC, UTIL], "Pytest")

        assert summaries[0].files == ["app/calc.py"]
        assert "Pytest" in llm.calls[0]["prompt"]
        assert "File: app/calc.py (python)" in llm.calls[0]["prompt"]

    async def test_test_code_uses_code_model_and_template(self):
        llm = FakeLLMProvider(["```python\ndef test_add():\n    assert add(1, 1) == 2\n```"])
        generator = ContentGenerator(llm, code_model="code-model")
        summary = TestCaseSummary(
            repository_id="octo/app",
            title="Adds",
            description="Adds two numbers",
            test_framework="Pytest",
            files=["app/calc.py"],
            test_case_count="1",
            estimated_time="1 minute",
        )

        code = await generator.generate_test_code(summary, [CALC, UTIL], template="# TEMPLATE")

        assert code.filename == "calc.test.py"
        assert code.language == "python"
        assert code.content == "def test_add():\n    assert add(1, 1) == 2"
        assert llm.calls[0]["model"] == "code-model"
        assert "# TEMPLATE" in llm.calls[0]["prompt"]
        assert "def noop" not in llm.calls[0]["prompt"]

    async def test_documentation(self):
        llm = FakeLLMProvider(["  # Docs  "])
        generator = ContentGenerator(llm)
        summary = TestCaseSummary(
            repository_id="octo/app",
            title="Adds",
            description="Adds two numbers",
            test_framework="Pytest",
            test_case_count="1",
            estimated_time="1 minute",
        )

        assert await generator.generate_documentation([summary], "Pytest") == "# Docs"
