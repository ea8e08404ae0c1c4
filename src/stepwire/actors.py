"""Binding display names onto step library instances."""

import inspect
import logging
from typing import Any, Optional, Protocol, runtime_checkable

from stepwire.errors import InvalidFieldError
from stepwire.fields import AnnotatedField
from stepwire.naming import humanize

__all__ = ["HasActorName", "actor_name_for", "assign_actor_name_in"]

logger = logging.getLogger(__name__)

ACTOR_FIELD = "actor"


@runtime_checkable
class HasActorName(Protocol):
    """Step libraries that accept their actor name explicitly."""

    def set_actor_name(self, name: str) -> None: ...


def actor_name_for(field: AnnotatedField) -> str:
    """The explicit actor name of the field, or one derived from its name."""
    return field.actor() or humanize(field.field_name)


def assign_actor_name_in(field: AnnotatedField, steps: Any):
    """Assign the actor name of ``field`` to the step library ``steps``.

    Step libraries implementing :class:`HasActorName` are given the name through
    ``set_actor_name``. Otherwise the name is written to an ``actor: str`` field
    declared by the first base class of the step library's class, if there is one.

    Raises:
        InvalidFieldError: If the name cannot be assigned.
    """
    actor_name = actor_name_for(field)
    if not actor_name or actor_name.isspace():
        return

    if isinstance(steps, HasActorName):
        _assign_with_setter(field, steps, actor_name)
        return

    actor_field_owner = _actor_field_owner(steps)
    if actor_field_owner is None:
        logger.debug(f"No actor field found for {type(steps).__qualname__}")
        return

    try:
        object.__setattr__(steps, ACTOR_FIELD, actor_name)
    except (AttributeError, TypeError) as e:
        raise InvalidFieldError(
            f"Could not access or set name field: {actor_field_owner.__qualname__}.{ACTOR_FIELD}",
            ACTOR_FIELD,
            actor_field_owner,
        ) from e


def _assign_with_setter(field: AnnotatedField, steps: HasActorName, actor_name: str):
    try:
        steps.set_actor_name(actor_name)
    except Exception as e:
        raise InvalidFieldError(
            f"Could not set actor name of {type(steps).__qualname__} for Steps field {field}",
            field.name,
            field.owner,
        ) from e


def _actor_field_owner(steps: Any) -> Optional[type]:
    superclass = type(steps).__bases__[0]
    annotation = inspect.get_annotations(superclass).get(ACTOR_FIELD)
    if annotation is str or annotation == "str":
        return superclass
    return None
