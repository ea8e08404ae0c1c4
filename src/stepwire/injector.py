"""
Module for instantiating step libraries into the marked fields of a test case.

An injection pass scans the test case's class for fields annotated with
:class:`~stepwire.markers.Steps`, resolves an instance for each one through the
:class:`~stepwire.policy.InstancePolicy` and assigns it to the field. Every step
library created during the pass is injected in turn, so that the marked fields
of step libraries nested at any depth are populated too. All levels of a pass
share one :class:`~stepwire.policy.InjectionContext`, so a shared step library
is created at most once per test case.

Assignment is not transactional: when a field fails, fields assigned before it
keep their values, and the pass as a whole should be treated as failed.
"""

import logging
from typing import Any, Optional

from stepwire.actors import assign_actor_name_in
from stepwire.errors import ConfigurationError, InjectionError
from stepwire.fields import (
    AnnotatedField,
    find_mandatory_annotated_fields,
    find_optional_annotated_fields,
)
from stepwire.policy import InjectionContext, InstancePolicy, Outcome
from stepwire.settings import InjectionSettings

__all__ = ["StepInjector"]

logger = logging.getLogger(__name__)


class StepInjector:
    """Populate the Steps fields of test cases and of the step libraries they use."""

    def __init__(
        self,
        settings: Optional[InjectionSettings] = None,
        policy: Optional[InstancePolicy] = None,
    ):
        self._settings = settings or InjectionSettings()
        self._policy = policy or InstancePolicy()

    def inject_into(
        self, test_case: Any, context: Optional[InjectionContext] = None
    ) -> InjectionContext:
        """Instantiate the step libraries of a test case.

        Args:
            test_case: The test case instance; its class must declare at least one
                Steps field.
            context: Shared instances to reuse. A new context is used if omitted.

        Returns:
            The context holding the shared step libraries of the pass.

        Raises:
            ConfigurationError: If the test case has no Steps field, or step
                libraries are nested too deeply or in a cycle.
            InvalidFieldError: If a field cannot be instantiated or assigned.
        """
        annotated_fields = find_mandatory_annotated_fields(type(test_case))
        return self._inject(test_case, annotated_fields, context)

    def inject_optional_into(
        self, target: Any, context: Optional[InjectionContext] = None
    ) -> InjectionContext:
        """Like :meth:`inject_into`, but an object without Steps fields is left alone."""
        annotated_fields = find_optional_annotated_fields(type(target))
        return self._inject(target, annotated_fields, context)

    def _inject(
        self,
        target: Any,
        annotated_fields: list[AnnotatedField],
        context: Optional[InjectionContext],
    ) -> InjectionContext:
        if context is None:
            context = InjectionContext()
        try:
            self._inject_fields(target, annotated_fields, context, (type(target),))
        except InjectionError as e:
            logger.error(f"Injection into {type(target).__qualname__} failed: {e}")
            raise
        return context

    def _inject_fields(
        self,
        target: Any,
        annotated_fields: list[AnnotatedField],
        context: InjectionContext,
        creation_chain: tuple[type, ...],
    ):
        for field in annotated_fields:
            resolution = self._policy.resolve(field, target, context)

            if resolution.outcome is Outcome.ALREADY_INSTANTIATED:
                logger.debug(f"Steps field {field} is already instantiated")
                continue

            field.set_value(target, resolution.instance)

            if resolution.outcome is Outcome.REUSED:
                logger.debug(f"Reused shared {field.field_class.__qualname__} for {field}")
                continue

            logger.debug(f"Created {field.field_class.__qualname__} for {field}")
            self._inject_nested(resolution.instance, context, creation_chain)
            assign_actor_name_in(field, resolution.instance)

    def _inject_nested(
        self, steps: Any, context: InjectionContext, creation_chain: tuple[type, ...]
    ):
        nested_fields = find_optional_annotated_fields(type(steps))
        if not nested_fields:
            return

        steps_type = type(steps)
        if steps_type in creation_chain:
            cycle = " -> ".join(t.__qualname__ for t in creation_chain + (steps_type,))
            raise ConfigurationError(f"Cycle detected between step libraries: {cycle}")

        if len(creation_chain) >= self._settings.max_depth:
            raise ConfigurationError(
                f"Step libraries nested deeper than {self._settings.max_depth} levels: "
                f"{' -> '.join(t.__qualname__ for t in creation_chain)}"
            )

        self._inject_fields(steps, nested_fields, context, creation_chain + (steps_type,))
