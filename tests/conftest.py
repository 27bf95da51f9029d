"""Shared fixtures: in-memory store, fake GitHub client and scripted LLM provider."""

import pytest

from testgen.config.schema import StorageConfig, SyncConfig
from testgen.entities import Repository
from testgen.generation import ContentGenerator
from testgen.service.orchestrator import TestGenerationOrchestrator
from testgen.service.pull_request import PullRequestAssembler
from testgen.service.sync import SyncEngine
from testgen.storage.memory import InMemoryStore

from tests.fakes import SAMPLE_TREE, FakeGitHubClient, FakeLLMProvider, remote_repository


@pytest.fixture
async def store():
    """Create an InMemoryStore instance for testing."""
    store = InMemoryStore(StorageConfig())
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def github():
    return FakeGitHubClient(files=SAMPLE_TREE, repositories=[remote_repository()])


@pytest.fixture
def llm():
    return FakeLLMProvider()


@pytest.fixture
async def repository(store):
    """A stored repository with an access token."""
    return await store.add_repository(
        Repository(id="octo/app", name="app", full_name="octo/app", owner="octo", access_token="token-123")
    )


@pytest.fixture
def sync_engine(store, github):
    return SyncEngine(store, github, SyncConfig())


@pytest.fixture
def orchestrator(store, sync_engine, llm):
    return TestGenerationOrchestrator(store, sync_engine, ContentGenerator(llm))


@pytest.fixture
def assembler(store, github, orchestrator):
    return PullRequestAssembler(store, github, orchestrator)
