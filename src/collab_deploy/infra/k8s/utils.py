"""Utility functions for the Kubernetes infrastructure layer.

Provides helper functions for running async code in sync contexts.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from collections.abc import Coroutine
from typing import Any


def run_sync[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine in a blocking sync context.

    This is useful for calling async controller and orchestrator methods
    from synchronous CLI commands. A KeyboardInterrupt cancels the running
    task before propagating.

    Args:
        coro: The coroutine to execute

    Returns:
        The result of the coroutine

    Example:
        from collab_deploy.infra.k8s import KubectlController, run_sync

        controller = KubectlController()
        image = run_sync(controller.get_deployment_image("staging", "collab"))
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop, create a new one
        return asyncio.run(coro)

    # We're inside an async context; run in a fresh loop on a worker thread
    # so the caller's loop is not re-entered
    if loop.is_running():
        with concurrent.futures.ThreadPoolExecutor() as pool:
            future = pool.submit(asyncio.run, coro)
            return future.result()
    return loop.run_until_complete(coro)
