"""REST API controller for registered workflows."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from litestar import Controller, get, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_200_OK

from easyflow.core.workflow import Workflow  # noqa: TC001
from easyflow.engine.registry import WorkflowRegistry  # noqa: TC001 - needed for DI
from easyflow.exceptions import WorkflowConstructionError, WorkflowNotFoundError
from easyflow.web.dto import RunResultDTO, RunWorkflowDTO, ToggleTasksDTO, WorkflowSummaryDTO

__all__ = ["WorkflowController"]

logger = logging.getLogger(__name__)


def _get_workflow(registry: WorkflowRegistry, name: str) -> Workflow:
    try:
        return registry.get(name)
    except WorkflowNotFoundError as e:
        raise NotFoundException(detail=f"Workflow '{name}' not found") from e


def _summary(name: str, workflow: Workflow) -> WorkflowSummaryDTO:
    disabled_ids = list(workflow.disabled)
    try:
        lifecycle = str(workflow.status().lifecycle)
    except WorkflowConstructionError as e:
        return WorkflowSummaryDTO(name=name, lifecycle="invalid", disabled_ids=disabled_ids, error=str(e))
    return WorkflowSummaryDTO(name=name, lifecycle=lifecycle, disabled_ids=disabled_ids)


class WorkflowController(Controller):
    """API controller for registered workflows.

    Provides endpoints for listing workflows, polling their live status,
    running them and toggling individual tasks.

    Tags: Workflows
    """

    path = "/"
    tags: ClassVar[list[str]] = ["Workflows"]

    @get("/")
    async def list_workflows(self, workflow_registry: WorkflowRegistry) -> list[WorkflowSummaryDTO]:
        """List all registered workflows.

        Args:
            workflow_registry: Injected workflow registry.

        Returns:
            List of workflow summaries.
        """
        return [_summary(name, workflow) for name, workflow in workflow_registry.list_workflows()]

    @get("/{name:str}/status")
    async def get_status(self, name: str, workflow_registry: WorkflowRegistry) -> dict[str, Any]:
        """Get the live status tree of a workflow.

        Args:
            name: The registered workflow name.
            workflow_registry: Injected workflow registry.

        Returns:
            The status tree rendered as JSON.

        Raises:
            NotFoundException: If the workflow is not registered.
        """
        return _get_workflow(workflow_registry, name).status().to_dict()

    @post("/{name:str}/run")
    async def run_workflow(
        self,
        name: str,
        data: RunWorkflowDTO,
        workflow_registry: WorkflowRegistry,
    ) -> RunResultDTO:
        """Run a workflow and wait for its outcome.

        A failing task does not turn into an HTTP error: the failure is
        reported in the result, next to the status tree showing where it
        happened.

        Args:
            name: The registered workflow name.
            data: Run parameters.
            workflow_registry: Injected workflow registry.

        Returns:
            The run outcome.

        Raises:
            NotFoundException: If the workflow is not registered.
            WorkflowConstructionError: If the workflow cannot be formalized.
        """
        workflow = _get_workflow(workflow_registry, name)
        workflow.status()

        try:
            result = await workflow.run(data.input)
        except WorkflowConstructionError:
            raise
        except Exception as e:
            logger.warning("Workflow '%s' failed: %s", name, e)
            return RunResultDTO(
                name=name,
                succeeded=False,
                error=str(e) or type(e).__name__,
                status=workflow.status().to_dict(),
            )

        return RunResultDTO(name=name, succeeded=True, result=result, status=workflow.status().to_dict())

    @post("/{name:str}/disable", status_code=HTTP_200_OK)
    async def disable_tasks(
        self,
        name: str,
        data: ToggleTasksDTO,
        workflow_registry: WorkflowRegistry,
    ) -> WorkflowSummaryDTO:
        """Disable tasks of a workflow, effective for nodes not yet entered.

        Args:
            name: The registered workflow name.
            data: Identifiers to disable.
            workflow_registry: Injected workflow registry.

        Returns:
            The updated workflow summary.

        Raises:
            NotFoundException: If the workflow is not registered.
        """
        workflow = _get_workflow(workflow_registry, name).disable(*data.ids)
        return _summary(name, workflow)

    @post("/{name:str}/enable", status_code=HTTP_200_OK)
    async def enable_tasks(
        self,
        name: str,
        data: ToggleTasksDTO,
        workflow_registry: WorkflowRegistry,
    ) -> WorkflowSummaryDTO:
        """Re-enable tasks of a workflow.

        Args:
            name: The registered workflow name.
            data: Identifiers to enable.
            workflow_registry: Injected workflow registry.

        Returns:
            The updated workflow summary.

        Raises:
            NotFoundException: If the workflow is not registered.
        """
        workflow = _get_workflow(workflow_registry, name).enable(*data.ids)
        return _summary(name, workflow)
