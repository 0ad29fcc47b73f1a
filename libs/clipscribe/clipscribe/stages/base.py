"""Stage abstractions for the upload pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod

from clipscribe.exceptions import ConfigurationError
from clipscribe.pipeline.context import PipelineContext


class Stage(ABC):
    """One step of a run; reads from and extends a PipelineContext.

    Stages translate every collaborator failure into their own PipelineError
    subclass. A missing context key is a wiring bug, reported as
    ConfigurationError.
    """

    name: str
    required_keys: tuple[str, ...] = ()

    @abstractmethod
    async def execute(self, context: PipelineContext) -> PipelineContext:
        """Run the step and return a new context with its outputs added."""

    def validate_input(self, context: PipelineContext) -> bool:
        return all(context.get(key) is not None for key in self.required_keys)

    def ensure_input(self, context: PipelineContext) -> None:
        if not self.validate_input(context):
            missing = [k for k in self.required_keys if context.get(k) is None]
            raise ConfigurationError(f"{self.name}: missing context keys {missing}")
