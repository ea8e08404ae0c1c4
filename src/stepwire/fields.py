"""Discovery and access of step library fields declared on test classes."""

import inspect
import logging
import types
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    ForwardRef,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from stepwire.errors import ConfigurationError, InvalidFieldError
from stepwire.markers import Steps

__all__ = [
    "AnnotatedField",
    "find_optional_annotated_fields",
    "find_mandatory_annotated_fields",
]

logger = logging.getLogger(__name__)

NO_ANNOTATED_FIELD_ERROR = "No field annotated with Steps was found in the test case."
DESCRIPTOR_TABLE_ATTRIBUTE = "__steps_fields__"


@dataclass(frozen=True)
class AnnotatedField:
    """A class annotation carrying a :class:`~stepwire.markers.Steps` marker.

    Attributes:
        name: The attribute name of the field.
        declared_type: The collaborator type to instantiate, with ``Optional`` unwrapped.
        marker: The marker declared on the field.
        owner: The class whose annotations declare the field.

    Example:
        >>> class CheckoutTest:
        ...     buyer: Annotated[OrderSteps, Steps(actor="Buyer")]
        >>>
        >>> field = find_mandatory_annotated_fields(CheckoutTest)[0]
        >>> field.field_name, field.field_class, field.actor()
        ('buyer', OrderSteps, 'Buyer')
    """

    name: str
    declared_type: type
    marker: Steps
    owner: type

    @property
    def field_name(self) -> str:
        return self.name

    @property
    def field_class(self) -> type:
        return self.declared_type

    @property
    def is_shared_instance(self) -> bool:
        return self.marker.shared

    @property
    def is_unique_instance(self) -> bool:
        return self.marker.unique_instance

    def actor(self) -> Optional[str]:
        """The explicit actor name, or None when the marker's name is blank."""
        return self.marker.explicit_actor_name()

    def get_value(self, target: Any) -> Any:
        """Read the field from ``target``; an attribute that was never set reads as None.

        Raises:
            InvalidFieldError: If reading the attribute fails for any other reason.
        """
        try:
            return getattr(target, self.name)
        except AttributeError:
            return None
        except Exception as e:
            raise InvalidFieldError(
                f"Could not access Steps field: {self}",
                self.name,
                self.owner,
            ) from e

    def set_value(self, target: Any, value: Any):
        """Write the field on ``target``, bypassing any ``__setattr__`` override.

        Raises:
            InvalidFieldError: If the attribute cannot be written, e.g. it is
                missing from ``__slots__`` or is a read-only property.
        """
        try:
            object.__setattr__(target, self.name, value)
        except (AttributeError, TypeError) as e:
            raise InvalidFieldError(
                f"Could not access or set Steps field: {self}",
                self.name,
                self.owner,
            ) from e

    def is_instantiated(self, target: Any) -> bool:
        return self.get_value(target) is not None

    def __str__(self):
        return f"{self.owner.__qualname__}.{self.name}"


def find_mandatory_annotated_fields(cls: type) -> list[AnnotatedField]:
    """Find the Steps fields of ``cls``, requiring there to be at least one.

    Raises:
        ConfigurationError: If neither the class nor its ancestors declare a Steps field.
    """
    annotated_fields = find_optional_annotated_fields(cls)
    if not annotated_fields:
        raise ConfigurationError(NO_ANNOTATED_FIELD_ERROR)
    return annotated_fields


def find_optional_annotated_fields(cls: type) -> list[AnnotatedField]:
    """Find the Steps fields declared by ``cls`` and its ancestors.

    Fields are returned in declaration order, the class's own fields first and
    then those of each ancestor in method resolution order. A field redeclared
    in a subclass is reported once, with the subclass's declaration.
    """
    return list(_descriptor_table(cls))


def _descriptor_table(cls: type) -> tuple[AnnotatedField, ...]:
    """The Steps fields of ``cls``, computed once and kept on the class itself."""
    table = cls.__dict__.get(DESCRIPTOR_TABLE_ATTRIBUTE)
    if table is not None:
        return table

    annotated_fields: dict[str, AnnotatedField] = {}
    for klass in inspect.getmro(cls):
        for name, annotation in _own_annotations(klass).items():
            if name in annotated_fields:
                continue
            annotated_field = _make_annotated_field(klass, name, annotation)
            if annotated_field:
                annotated_fields[name] = annotated_field
    table = tuple(annotated_fields.values())

    try:
        setattr(cls, DESCRIPTOR_TABLE_ATTRIBUTE, table)
    except (AttributeError, TypeError):
        logger.debug(f"Steps fields of {cls.__qualname__} cannot be cached on the class")
    return table


def _own_annotations(klass: type) -> dict[str, Any]:
    """Annotations declared directly on ``klass``, with forward references resolved.

    Each annotation is resolved on its own. One that cannot be resolved, such as a
    name imported only under ``TYPE_CHECKING``, is left out unless it mentions the
    Steps marker.

    Raises:
        ConfigurationError: If an annotation mentioning Steps cannot be resolved.
    """
    resolved = {}
    for name, annotation in _declared_annotations(klass).items():
        try:
            resolved[name] = _resolve(klass, annotation)
        except (NameError, AttributeError, SyntaxError, TypeError) as e:
            if not _mentions_marker(annotation):
                logger.debug(f"Skipping unresolvable annotation {klass.__qualname__}.{name}: {e}")
                continue
            raise ConfigurationError(
                f"Could not resolve annotations of {klass.__qualname__}: {e}"
            ) from e
    return resolved


def _declared_annotations(klass: type) -> dict[str, Any]:
    try:
        return inspect.get_annotations(klass)
    except NameError:
        # deferred annotations naming something undefined at runtime
        import annotationlib

        return annotationlib.get_annotations(klass, format=annotationlib.Format.FORWARDREF)


def _resolve(klass: type, annotation: Any) -> Any:
    """Evaluate one annotation as if it were declared alone on ``klass``."""
    holder = type(
        klass.__name__,
        (),
        {"__module__": klass.__module__, "__annotations__": {"value": annotation}},
    )
    return get_type_hints(holder, localns=dict(vars(klass)), include_extras=True)["value"]


def _mentions_marker(annotation: Any) -> bool:
    if isinstance(annotation, str):
        text = annotation
    elif isinstance(annotation, ForwardRef):
        text = annotation.__forward_arg__
    else:
        text = repr(annotation)
    return Steps.__name__ in text


def _make_annotated_field(klass: type, name: str, annotation) -> Optional[AnnotatedField]:
    if get_origin(annotation) is not Annotated:
        return None

    base_type, *metadata = get_args(annotation)
    marker = next((_as_marker(m) for m in metadata if _as_marker(m)), None)
    if marker is None:
        return None

    return AnnotatedField(name, _unwrap_optional(base_type), marker, klass)


def _as_marker(metadata: Any) -> Optional[Steps]:
    if isinstance(metadata, Steps):
        return metadata
    if metadata is Steps:
        return Steps()
    return None


def _unwrap_optional(declared_type):
    if get_origin(declared_type) not in (Union, types.UnionType):
        return declared_type
    candidates = [arg for arg in get_args(declared_type) if arg is not type(None)]
    if len(candidates) == 1:
        return candidates[0]
    return declared_type
