"""Web API for easyflow.

This package provides the REST API controller mounted by WorkflowPlugin when
``enable_api=True`` (the default).

Example:
    Basic usage with WorkflowPlugin::

        from litestar import Litestar
        from easyflow import WorkflowPlugin, WorkflowPluginConfig

        app = Litestar(
            plugins=[
                WorkflowPlugin(
                    config=WorkflowPluginConfig(
                        workflows=[nightly],
                        api_path_prefix="/workflows",
                    )
                ),
            ],
        )

    Endpoints::

        GET  /workflows/                  list registered workflows
        GET  /workflows/{name}/status     live status tree
        POST /workflows/{name}/run        run with {"input": ...}
        POST /workflows/{name}/disable    {"ids": [...]}
        POST /workflows/{name}/enable     {"ids": [...]}
"""

from __future__ import annotations

from easyflow.web.controllers import WorkflowController
from easyflow.web.dto import RunResultDTO, RunWorkflowDTO, ToggleTasksDTO, WorkflowSummaryDTO
from easyflow.web.exceptions import construction_error_handler

__all__ = [
    "RunResultDTO",
    "RunWorkflowDTO",
    "ToggleTasksDTO",
    "WorkflowController",
    "WorkflowSummaryDTO",
    "construction_error_handler",
]
