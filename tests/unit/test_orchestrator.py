"""Unit tests for TestGenerationOrchestrator."""

import pytest

from testgen.core.errors import BadRequestError, NotFoundError, RemoteServiceError
from testgen.entities import RepositoryFile, TestCaseSummary, TestTemplate
from testgen.providers.base import ProviderError

from tests.fakes import summaries_json


async def _file(store, repository_id: str, path: str) -> RepositoryFile:
    return next(f for f in await store.list_files(repository_id) if f.path == path)


@pytest.fixture
async def synced(repository, sync_engine):
    """Repository with the sample tree synced (nothing selected, nothing loaded)."""
    await sync_engine.sync_files(repository.id)
    return repository


@pytest.mark.asyncio
class TestGenerateSummaries:
    """Test interactive summary generation."""

    async def test_unknown_repository(self, orchestrator):
        with pytest.raises(NotFoundError):
            await orchestrator.generate_summaries("nobody/nothing", "Pytest")

    async def test_requires_selection(self, synced, orchestrator, llm):
        """Nothing selected: BadRequest and no LLM call."""
        with pytest.raises(BadRequestError, match="No files selected"):
            await orchestrator.generate_summaries(synced.id, "Pytest")
        assert llm.calls == []

    async def test_persists_summaries(self, store, synced, orchestrator, sync_engine, llm):
        calc = await _file(store, synced.id, "src/calc.py")
        await sync_engine.set_file_selection(calc.id, True)
        llm.responses.append(summaries_json("src/calc.py", count=2))

        summaries = await orchestrator.generate_summaries(synced.id, "Pytest")

        assert len(summaries) == 2
        assert all(s.repository_id == synced.id and s.test_framework == "Pytest" for s in summaries)
        assert all(s.generated_code is None for s in summaries)
        assert len(await store.list_test_cases(synced.id)) == 2
        assert "def add(a, b)" in llm.calls[0]["prompt"]
        assert llm.calls[0]["json_output"] is True

    async def test_content_loaded_once_across_runs(self, store, synced, orchestrator, sync_engine, llm, github):
        calc = await _file(store, synced.id, "src/calc.py")
        await sync_engine.set_file_selection(calc.id, True)
        llm.default = summaries_json("src/calc.py")

        await orchestrator.generate_summaries(synced.id, "Pytest")
        await orchestrator.generate_summaries(synced.id, "Pytest")

        assert github.content_calls["src/calc.py"] == 1

    async def test_failed_content_load_excludes_file(self, store, synced, orchestrator, sync_engine, llm, github):
        """A file whose content cannot be fetched is left out of the prompt."""
        await sync_engine.select_all(synced.id)
        github.failing_content.add("src/app.ts")
        llm.responses.append(summaries_json("src/calc.py"))

        await orchestrator.generate_summaries(synced.id, "Pytest")

        assert "src/calc.py" in llm.calls[0]["prompt"]
        assert "src/app.ts" not in llm.calls[0]["prompt"]

    async def test_all_content_loads_fail(self, store, synced, orchestrator, sync_engine, llm, github):
        calc = await _file(store, synced.id, "src/calc.py")
        await sync_engine.set_file_selection(calc.id, True)
        github.failing_content.add("src/calc.py")

        with pytest.raises(BadRequestError):
            await orchestrator.generate_summaries(synced.id, "Pytest")
        assert llm.calls == []

    async def test_summary_files_restricted_to_supplied_paths(self, store, synced, orchestrator, sync_engine, llm):
        calc = await _file(store, synced.id, "src/calc.py")
        await sync_engine.set_file_selection(calc.id, True)
        llm.responses.append(summaries_json("src/calc.py", "src/invented.py"))

        summaries = await orchestrator.generate_summaries(synced.id, "Pytest")

        assert summaries[0].files == ["src/calc.py"]

    async def test_summary_without_known_files_gets_all_supplied(
        self, store, synced, orchestrator, sync_engine, llm
    ):
        await sync_engine.select_all(synced.id)
        llm.responses.append(summaries_json("elsewhere.py"))

        summaries = await orchestrator.generate_summaries(synced.id, "Jest")

        assert sorted(summaries[0].files) == ["README.md", "src/app.ts", "src/calc.py"]

    async def test_llm_failure_propagates(self, store, synced, orchestrator, sync_engine, llm):
        calc = await _file(store, synced.id, "src/calc.py")
        await sync_engine.set_file_selection(calc.id, True)
        llm.responses.append(ProviderError("upstream timeout", provider="fake"))

        with pytest.raises(RemoteServiceError, match="upstream timeout"):
            await orchestrator.generate_summaries(synced.id, "Pytest")
        assert await store.list_test_cases(synced.id) == []

    async def test_malformed_llm_answer(self, store, synced, orchestrator, sync_engine, llm):
        calc = await _file(store, synced.id, "src/calc.py")
        await sync_engine.set_file_selection(calc.id, True)
        llm.responses.append("I would suggest some tests.")

        with pytest.raises(ProviderError):
            await orchestrator.generate_summaries(synced.id, "Pytest")


@pytest.mark.asyncio
class TestBatchGenerate:
    """Test batch summary generation."""

    async def test_no_loaded_content(self, synced, orchestrator, llm):
        """Freshly synced files have no content, so nothing is eligible."""
        with pytest.raises(BadRequestError, match="No code files found for batch processing"):
            await orchestrator.batch_generate(synced.id, "Jest")
        assert llm.calls == []

    async def test_only_code_files_with_content(self, store, synced, orchestrator, sync_engine, llm):
        """Markdown and files under skipped directories are not eligible."""
        for path in ("src/calc.py", "README.md"):
            await sync_engine.load_content(synced, await _file(store, synced.id, path))
        await store.add_file(
            RepositoryFile(
                repository_id=synced.id,
                path="node_modules/dep/index.js",
                name="index.js",
                language="javascript",
                content="module.exports = {};",
            )
        )
        llm.responses.append(summaries_json("src/calc.py"))

        summaries = await orchestrator.batch_generate(synced.id, "Pytest")

        prompt = llm.calls[0]["prompt"]
        assert "src/calc.py" in prompt
        assert "README.md" not in prompt
        assert "node_modules" not in prompt
        assert summaries[0].files == ["src/calc.py"]

    async def test_ignores_selection(self, store, synced, orchestrator, sync_engine, llm):
        await sync_engine.load_content(synced, await _file(store, synced.id, "src/app.ts"))
        llm.responses.append(summaries_json("src/app.ts"))

        summaries = await orchestrator.batch_generate(synced.id, "Jest")

        assert len(summaries) == 1
        assert await sync_engine.list_selected_files(synced.id) == []


@pytest.mark.asyncio
class TestGenerateCode:
    """Test code generation for stored summaries."""

    @pytest.fixture
    async def summary(self, store, synced):
        return await store.add_test_case(
            TestCaseSummary(
                repository_id=synced.id,
                title="Addition",
                description="Adds numbers",
                test_framework="Pytest",
                files=["src/calc.py"],
                test_case_count="2",
                estimated_time="1 minute",
            )
        )

    async def test_unknown_summary(self, orchestrator):
        with pytest.raises(NotFoundError):
            await orchestrator.generate_code("missing")

    async def test_stores_generated_code(self, store, summary, orchestrator, llm):
        llm.responses.append("```python\ndef test_add():\n    assert add(1, 2) == 3\n```")

        result = await orchestrator.generate_code(summary.id)

        assert result.code.filename == "calc.test.py"
        assert result.code.content.startswith("def test_add")
        assert result.summary.generated_code == result.code.content
        assert (await store.get_test_case(summary.id)).generated_code == result.code.content

    async def test_regenerate_overwrites(self, store, summary, orchestrator, llm):
        llm.responses.extend(["first = 1", "second = 2"])

        await orchestrator.generate_code(summary.id)
        result = await orchestrator.generate_code(summary.id)

        assert result.summary.generated_code == "second = 2"

    async def test_template_used_as_hint(self, store, summary, orchestrator, llm):
        template = await store.add_template(
            TestTemplate(framework="Pytest", category="unit", template="class TestMarker:\n    pass")
        )
        llm.default = "def test_x():\n    pass"

        await orchestrator.generate_code(summary.id, template.id)

        assert "class TestMarker" in llm.calls[0]["prompt"]

    async def test_unknown_template(self, summary, orchestrator):
        with pytest.raises(NotFoundError):
            await orchestrator.generate_code(summary.id, "missing-template")

    async def test_referenced_files_without_content(self, summary, orchestrator, github, llm):
        github.failing_content.add("src/calc.py")

        with pytest.raises(BadRequestError, match="Referenced files have no content"):
            await orchestrator.generate_code(summary.id)
        assert llm.calls == []

    async def test_empty_answer_is_an_error(self, summary, orchestrator, llm):
        llm.responses.append("   ")

        with pytest.raises(ProviderError):
            await orchestrator.generate_code(summary.id)


@pytest.mark.asyncio
class TestAuxiliaryGeneration:
    """Test custom tests, documentation and summary maintenance."""

    async def test_custom_test_for_chosen_files(self, store, synced, orchestrator, llm):
        calc = await _file(store, synced.id, "src/calc.py")
        llm.responses.append("def test_custom():\n    assert True")

        code = await orchestrator.generate_custom_test(synced.id, "Test edge cases", "Pytest", [calc.id])

        assert code.filename == "calc.test.py"
        assert "Test edge cases" in llm.calls[0]["prompt"]
        assert await store.list_test_cases(synced.id) == []

    async def test_custom_test_requires_prompt(self, synced, orchestrator):
        with pytest.raises(BadRequestError):
            await orchestrator.generate_custom_test(synced.id, "", "Pytest")

    async def test_documentation_requires_summaries(self, synced, orchestrator):
        with pytest.raises(BadRequestError, match="No test cases found for documentation"):
            await orchestrator.generate_documentation(synced.id, "Jest")

    async def test_documentation(self, store, synced, orchestrator, llm):
        await store.add_test_case(
            TestCaseSummary(
                repository_id=synced.id,
                title="Rendering",
                description="Renders the app",
                test_framework="Jest",
                test_case_count="1",
                estimated_time="1 minute",
            )
        )
        llm.responses.append("# Test suite\n")

        documentation = await orchestrator.generate_documentation(synced.id, "Jest")

        assert documentation == "# Test suite"
        assert "Rendering" in llm.calls[0]["prompt"]

    async def test_update_and_delete(self, store, synced, orchestrator):
        summary = await store.add_test_case(
            TestCaseSummary(
                repository_id=synced.id,
                title="Old",
                description="d",
                test_framework="Jest",
                test_case_count="1",
                estimated_time="1 minute",
            )
        )

        updated = await orchestrator.update_test_case(summary.id, {"title": "New", "priority": "high"})
        assert updated.title == "New"
        assert updated.priority == "high"

        await orchestrator.delete_test_case(summary.id)
        assert await orchestrator.list_test_cases(synced.id) == []

        with pytest.raises(NotFoundError):
            await orchestrator.delete_test_case(summary.id)
        with pytest.raises(NotFoundError):
            await orchestrator.update_test_case(summary.id, {"title": "x"})

    async def test_update_rejects_null_title(self, store, synced, orchestrator):
        summary = await store.add_test_case(
            TestCaseSummary(
                repository_id=synced.id,
                title="Old",
                description="d",
                test_framework="Jest",
                test_case_count="1",
                estimated_time="1 minute",
            )
        )

        with pytest.raises(BadRequestError, match="Invalid test case update"):
            await orchestrator.update_test_case(summary.id, {"title": None})

        assert (await store.get_test_case(summary.id)).title == "Old"
