"""Workflow engine facade."""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from types import TracebackType

from agent_workflows import prompts
from agent_workflows.core.config import WorkflowsConfig
from agent_workflows.engine.cancellation import CancellationToken
from agent_workflows.engine.chain import ChainAborted, ChainResult, ChainStep, run_chain
from agent_workflows.engine.completion import CompletionPort, LLMCompletionPort
from agent_workflows.engine.evaluator_optimizer import (
    RefinedResponse,
    RefineFailed,
    run_refine_loop,
)
from agent_workflows.engine.events import EventHandler
from agent_workflows.engine.orchestrator_workers import DispatchResult, run_decompose_dispatch
from agent_workflows.engine.parallel import AggregatedResult, run_fan_out_aggregate
from agent_workflows.engine.prompt import PromptTemplate
from agent_workflows.llm.factory import LLMFactory

logger = logging.getLogger(__name__)


class WorkflowEngine:
    """Entry point wiring configuration, an LLM provider and the runners.

    The engine owns one bounded thread pool shared by every fan-out and
    dispatch it runs, which caps total concurrency against the provider
    across concurrent workflow invocations. Use it as a context manager, or
    call :meth:`close`, to release the pool.

    Every method falls back to the prompts in :mod:`agent_workflows.prompts`
    when no template is given.
    """

    def __init__(
        self,
        config: WorkflowsConfig | None = None,
        port: CompletionPort | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration object. If None, loads from environment.
            port: Completion port to use instead of one built from
                ``config.llm``.
        """
        self.config = config or WorkflowsConfig()
        self.config.setup_logging()

        logger.info("Initializing workflow engine")

        self.port: CompletionPort = (
            LLMCompletionPort(LLMFactory.create(self.config.llm)) if port is None else port
        )
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.engine.max_workers,
            thread_name_prefix="workflow-engine",
        )

        logger.info("Workflow engine initialized successfully")

    def __enter__(self) -> "WorkflowEngine":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the shared worker pool."""
        self._executor.shutdown(wait=True, cancel_futures=True)
        logger.info("Workflow engine closed")

    def run_chain(
        self,
        initial_input: str,
        steps: Sequence[ChainStep] | None = None,
        *,
        cancel: CancellationToken | None = None,
        on_event: EventHandler | None = None,
    ) -> ChainResult | ChainAborted:
        """Run a prompt chain (defaults to the project delivery chain)."""
        return run_chain(
            self.port,
            prompts.PROJECT_CHAIN if steps is None else steps,
            initial_input,
            cancel=cancel,
            on_event=on_event,
        )

    def run_fan_out_aggregate(
        self,
        inputs: Sequence[str],
        template: PromptTemplate | str | None = None,
        aggregate_template: PromptTemplate | str | None = None,
        *,
        task: str | None = None,
        cancel: CancellationToken | None = None,
        on_event: EventHandler | None = None,
    ) -> AggregatedResult:
        """Fan a template out over ``inputs`` and aggregate the results."""
        return run_fan_out_aggregate(
            self.port,
            prompts.RISK_ASSESSMENT if template is None else template,
            prompts.AGGREGATOR if aggregate_template is None else aggregate_template,
            inputs,
            task=task,
            separator=self.config.engine.result_separator,
            executor=self._executor,
            cancel=cancel,
            on_event=on_event,
        )

    def run_decompose_dispatch(
        self,
        task: str,
        orchestrator_template: PromptTemplate | str | None = None,
        worker_template: PromptTemplate | str | None = None,
        *,
        cancel: CancellationToken | None = None,
        on_event: EventHandler | None = None,
    ) -> DispatchResult:
        """Decompose ``task`` into subtasks and dispatch a worker per subtask."""
        return run_decompose_dispatch(
            self.port,
            task,
            prompts.ORCHESTRATOR if orchestrator_template is None else orchestrator_template,
            prompts.WORKER if worker_template is None else worker_template,
            parallel=self.config.engine.parallel_dispatch,
            executor=self._executor,
            cancel=cancel,
            on_event=on_event,
        )

    def run_refine_loop(
        self,
        task: str,
        generation_template: PromptTemplate | str | None = None,
        evaluation_template: PromptTemplate | str | None = None,
        max_iterations: int | None = None,
        *,
        cancel: CancellationToken | None = None,
        on_event: EventHandler | None = None,
    ) -> RefinedResponse | RefineFailed:
        """Generate and refine a solution until the evaluator passes it."""
        return run_refine_loop(
            self.port,
            task,
            prompts.GENERATOR if generation_template is None else generation_template,
            prompts.EVALUATOR if evaluation_template is None else evaluation_template,
            self.config.engine.max_iterations if max_iterations is None else max_iterations,
            cancel=cancel,
            on_event=on_event,
        )
