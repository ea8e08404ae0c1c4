"""Deciding whether a step library field gets a new, shared or no instance.

The :class:`InstancePolicy` is consulted once per marked field during an
injection pass. Shared instances created during the pass are remembered in an
:class:`InjectionContext`, so that every shared field of the same type within
one test case, at any nesting depth, refers to the same object.
"""

import enum
from dataclasses import dataclass
from typing import Any

from stepwire.errors import InvalidFieldError
from stepwire.fields import AnnotatedField

__all__ = ["InjectionContext", "InstancePolicy", "Outcome", "Resolution"]


class InjectionContext:
    """Shared step library instances created during one injection pass, keyed by type.

    A context belongs to a single test case; a new pass starts with a new context.

    Example:
        >>> context = InjectionContext()
        >>> context.register(OrderSteps, order_steps)
        >>> OrderSteps in context
        True
        >>> context[OrderSteps] is order_steps
        True
    """

    def __init__(self):
        self._shared_instances: dict[type, Any] = {}

    def register(self, collaborator_type: type, instance: Any):
        self._shared_instances[collaborator_type] = instance

    def __getitem__(self, collaborator_type: type) -> Any:
        return self._shared_instances[collaborator_type]

    def __contains__(self, collaborator_type: type) -> bool:
        return collaborator_type in self._shared_instances

    def __len__(self) -> int:
        return len(self._shared_instances)


class Outcome(enum.Enum):
    ALREADY_INSTANTIATED = "already_instantiated"
    REUSED = "reused"
    CREATED = "created"


@dataclass(frozen=True)
class Resolution:
    """The value a field should hold after the policy has been applied.

    Attributes:
        outcome: How the value was obtained.
        instance: The step library instance; the existing value when the field
            was already instantiated.
    """

    outcome: Outcome
    instance: Any

    @property
    def is_new(self) -> bool:
        return self.outcome is Outcome.CREATED


class InstancePolicy:
    """Resolve the instance to assign to a marked field.

    In order of precedence:
      - a field that already holds a value is left as it is;
      - a unique instance field always gets a fresh instance, which is not shared;
      - a shared field reuses the context's instance of its type, if there is one;
      - otherwise a fresh instance is created, and registered in the context if
        the field is shared.
    """

    def resolve(
        self, field: AnnotatedField, owner: Any, context: InjectionContext
    ) -> Resolution:
        existing = field.get_value(owner)
        if existing is not None:
            return Resolution(Outcome.ALREADY_INSTANTIATED, existing)

        if field.is_unique_instance:
            return Resolution(Outcome.CREATED, self.instantiate(field))

        if field.is_shared_instance and field.field_class in context:
            return Resolution(Outcome.REUSED, context[field.field_class])

        instance = self.instantiate(field)
        if field.is_shared_instance:
            context.register(field.field_class, instance)
        return Resolution(Outcome.CREATED, instance)

    def instantiate(self, field: AnnotatedField) -> Any:
        """Create a step library instance with its no-argument constructor.

        Raises:
            InvalidFieldError: If the declared type cannot be constructed.
        """
        try:
            return field.field_class()
        except Exception as e:
            raise InvalidFieldError(
                f"Could not instantiate {field.field_class!r} for Steps field {field}: {e}",
                field.name,
                field.owner,
            ) from e
