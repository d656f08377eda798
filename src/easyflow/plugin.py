"""Litestar plugin for serving workflows.

This module provides the WorkflowPlugin, which makes a WorkflowRegistry
available for dependency injection and optionally mounts the REST API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from easyflow.engine.registry import WorkflowRegistry
from easyflow.exceptions import WorkflowConstructionError

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from easyflow.core.workflow import Workflow

__all__ = ["WorkflowPlugin", "WorkflowPluginConfig"]


@dataclass
class WorkflowPluginConfig:
    """Configuration for the WorkflowPlugin.

    Attributes:
        registry: Optional pre-configured WorkflowRegistry. If not provided,
            a new one will be created.
        workflows: Workflows to register on app startup, either as bare
            workflows (registered under their name or id) or as
            ``(name, workflow)`` pairs.
        dependency_key_registry: The key used for dependency injection of
            the WorkflowRegistry. Defaults to "workflow_registry".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for all workflow API endpoints.
            Defaults to "/workflows".
        api_guards: List of Litestar guards to apply to all workflow API endpoints.
        api_tags: OpenAPI tags to apply to workflow API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
    """

    registry: WorkflowRegistry | None = None
    workflows: list[Workflow | tuple[str, Workflow]] = field(default_factory=list)
    dependency_key_registry: str = "workflow_registry"
    enable_api: bool = True
    api_path_prefix: str = "/workflows"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Workflows"])
    include_api_in_schema: bool = True


class WorkflowPlugin(InitPluginProtocol):
    """Litestar plugin for workflow serving.

    Example:
        Basic usage::

            from litestar import Litestar
            from easyflow import Workflow, WorkflowPlugin, WorkflowPluginConfig

            nightly = Workflow("nightly")
            nightly.sequence("Backup", dump, upload).parallel(prune, report)

            app = Litestar(plugins=[WorkflowPlugin(config=WorkflowPluginConfig(workflows=[nightly]))])

        Using in a route handler::

            @post("/nightly/skip-report")
            async def skip_report(workflow_registry: WorkflowRegistry) -> None:
                workflow_registry.get("nightly").disable(report)
    """

    __slots__ = ("_config", "_registry")

    def __init__(self, config: WorkflowPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or WorkflowPluginConfig()
        self._registry: WorkflowRegistry | None = None

    @property
    def registry(self) -> WorkflowRegistry:
        """Get the workflow registry.

        Returns:
            The WorkflowRegistry instance.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._registry is None:
            msg = "WorkflowPlugin has not been initialized. Access registry after app startup."
            raise RuntimeError(msg)
        return self._registry

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        This method:
        1. Creates or uses the provided WorkflowRegistry
        2. Registers the configured workflows
        3. Adds the registry dependency provider to the app config
        4. Optionally registers the REST API controller if enable_api=True

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        self._registry = self._config.registry or WorkflowRegistry()

        for entry in self._config.workflows:
            if isinstance(entry, tuple):
                name, workflow = entry
                self._registry.register(workflow, name=name)
            else:
                self._registry.register(entry)

        def provide_registry() -> WorkflowRegistry:
            return self._registry  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_registry] = Provide(
            provide_registry,
            sync_to_thread=False,
        )

        if self._config.enable_api:
            from litestar import Router

            from easyflow.web.controllers import WorkflowController
            from easyflow.web.exceptions import construction_error_handler

            workflow_router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[WorkflowController],
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )
            app_config.route_handlers.append(workflow_router)

            app_config.exception_handlers[WorkflowConstructionError] = construction_error_handler  # type: ignore[assignment]

        return app_config
