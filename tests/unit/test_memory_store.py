"""Unit tests for InMemoryStore."""

import pytest

from testgen.config.schema import StorageConfig
from testgen.entities import Repository, RepositoryFile, TestCaseSummary, TestTemplate
from testgen.storage import StorageError, create_store
from testgen.storage.memory import InMemoryStore


def _repository(repo_id: str = "octo/app") -> Repository:
    owner, name = repo_id.split("/")
    return Repository(id=repo_id, name=name, full_name=repo_id, owner=owner, access_token="secret")


@pytest.mark.asyncio
class TestRepositories:
    """Test repository records."""

    async def test_add_and_get(self, store):
        await store.add_repository(_repository())

        repository = await store.get_repository("octo/app")

        assert repository.full_name == "octo/app"
        assert repository.access_token == "secret"

    async def test_duplicate_id_rejected(self, store):
        await store.add_repository(_repository())

        with pytest.raises(StorageError):
            await store.add_repository(_repository())

    async def test_partial_update_keeps_token(self, store):
        await store.add_repository(_repository())

        updated = await store.update_repository("octo/app", {"description": "Demo", "id": "ignored"})

        assert updated.id == "octo/app"
        assert updated.description == "Demo"
        assert updated.access_token == "secret"

    async def test_update_missing(self, store):
        assert await store.update_repository("nobody/nothing", {"description": "x"}) is None

    async def test_update_unknown_field(self, store):
        await store.add_repository(_repository())

        with pytest.raises(ValueError):
            await store.update_repository("octo/app", {"stars": 5})

    async def test_reads_are_copies(self, store):
        """Mutating a returned record does not change the stored one."""
        await store.add_repository(_repository())

        copy = await store.get_repository("octo/app")
        copy.description = "changed"

        assert (await store.get_repository("octo/app")).description is None


@pytest.mark.asyncio
class TestFiles:
    """Test file records."""

    async def test_path_unique_per_repository(self, store):
        await store.add_file(RepositoryFile(repository_id="octo/app", path="a.py", name="a.py"))
        await store.add_file(RepositoryFile(repository_id="octo/lib", path="a.py", name="a.py"))

        with pytest.raises(StorageError):
            await store.add_file(RepositoryFile(repository_id="octo/app", path="a.py", name="a.py"))

    async def test_list_with_selection_filter(self, store):
        a = await store.add_file(RepositoryFile(repository_id="octo/app", path="a.py", name="a.py"))
        await store.add_file(RepositoryFile(repository_id="octo/app", path="b.py", name="b.py"))
        await store.update_file(a.id, {"is_selected": True})

        assert [f.path for f in await store.list_files("octo/app", selected=True)] == ["a.py"]
        assert [f.path for f in await store.list_files("octo/app", selected=False)] == ["b.py"]
        assert len(await store.list_files("octo/app")) == 2

    async def test_update_cannot_move_file(self, store):
        a = await store.add_file(RepositoryFile(repository_id="octo/app", path="a.py", name="a.py"))

        updated = await store.update_file(a.id, {"path": "b.py", "repository_id": "x", "content": "pass"})

        assert updated.path == "a.py"
        assert updated.repository_id == "octo/app"
        assert updated.content == "pass"


@pytest.mark.asyncio
class TestTestCasesAndTemplates:
    """Test summary and template records."""

    async def test_summary_lifecycle(self, store):
        summary = await store.add_test_case(
            TestCaseSummary(
                repository_id="octo/app",
                title="T",
                description="D",
                test_framework="Jest",
                test_case_count="1",
                estimated_time="1 minute",
            )
        )

        updated = await store.update_test_case(summary.id, {"generated_code": "x", "repository_id": "other"})
        assert updated.generated_code == "x"
        assert updated.repository_id == "octo/app"

        assert await store.delete_test_case(summary.id) is True
        assert await store.delete_test_case(summary.id) is False
        assert await store.list_test_cases("octo/app") == []

    async def test_template_filters(self, store):
        await store.add_template(TestTemplate(framework="Pytest", category="unit", template="a"))
        await store.add_template(TestTemplate(framework="Cypress", category="e2e", template="b"))
        await store.add_template(TestTemplate(framework="Playwright", category="e2e", template="c"))

        assert len(await store.list_templates()) == 3
        assert [t.template for t in await store.list_templates(framework="Pytest")] == ["a"]
        assert {t.framework for t in await store.list_templates(category="e2e")} == {"Cypress", "Playwright"}
        assert await store.list_templates(framework="Cypress", category="unit") == []


class TestStoreFactory:
    def test_memory(self):
        assert isinstance(create_store(StorageConfig(store_type="memory")), InMemoryStore)

    def test_unknown_type(self):
        config = StorageConfig.model_construct(store_type="postgres", extra_params={})

        with pytest.raises(ValueError, match="Unknown store type"):
            create_store(config)
