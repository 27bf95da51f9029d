"""Service layer - Business logic orchestration.

This module contains service classes that orchestrate business logic:
- SyncEngine: Repository import, file-tree sync and selection
- TestGenerationOrchestrator: Summaries and test code from selected files
- PullRequestAssembler: Branch, commits and pull request for generated tests
- build_services: Wires the above from configuration
"""

from dataclasses import dataclass
from typing import Optional

from testgen.clients.github import GitHubClient
from testgen.config.schema import AppConfig
from testgen.generation import ContentGenerator
from testgen.observability.logging import get_logger
from testgen.providers import LLMProvider, create_llm_provider, provider_config_from
from testgen.service.orchestrator import CodeGenerationResult, TestGenerationOrchestrator
from testgen.service.pull_request import PullRequestAssembler, PullRequestResult
from testgen.service.sync import SyncEngine, SyncResult
from testgen.service.templates import seed_default_templates
from testgen.storage import Store, create_store

logger = get_logger(__name__)


@dataclass
class Services:
    """Everything the route layer needs, sharing one store and one set of clients."""

    config: AppConfig
    store: Store
    github: GitHubClient
    llm: LLMProvider
    sync: SyncEngine
    orchestrator: TestGenerationOrchestrator
    pull_requests: PullRequestAssembler

    async def close(self) -> None:
        """Release network resources and the store."""
        await self.github.close()
        await self.llm.close()
        await self.store.close()


async def build_services(
    config: AppConfig,
    store: Optional[Store] = None,
    github: Optional[GitHubClient] = None,
    llm: Optional[LLMProvider] = None,
) -> Services:
    """Initialize the store, seed templates and wire the services.

    Args:
        config: Application configuration
        store: Store to use instead of the configured one
        github: GitHub client to use instead of a configured one
        llm: LLM provider to use instead of the configured one

    Returns:
        Ready-to-use Services
    """
    store = store or create_store(config.storage)
    await store.initialize()
    await seed_default_templates(store)

    github = github or GitHubClient(config.github)
    llm = llm or create_llm_provider(provider_config_from(config.llm))

    generator = ContentGenerator(
        llm,
        code_model=config.llm.code_model_name,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
    sync = SyncEngine(store, github, config.sync)
    orchestrator = TestGenerationOrchestrator(store, sync, generator)
    pull_requests = PullRequestAssembler(store, github, orchestrator)

    logger.info("services_ready", store_type=store.__class__.__name__, llm_provider=llm.config.provider_type)
    return Services(
        config=config,
        store=store,
        github=github,
        llm=llm,
        sync=sync,
        orchestrator=orchestrator,
        pull_requests=pull_requests,
    )


__all__ = [
    "CodeGenerationResult",
    "PullRequestAssembler",
    "PullRequestResult",
    "Services",
    "SyncEngine",
    "SyncResult",
    "TestGenerationOrchestrator",
    "build_services",
]
