"""The marker used to declare injectable step library fields."""

from dataclasses import dataclass
from typing import Optional

__all__ = ["Steps"]


@dataclass(frozen=True)
class Steps:
    """Marks a class annotation as a step library field to be populated on injection.

    The marker is attached to the field's type with ``typing.Annotated``:

        >>> class CheckoutTest:
        ...     buyer: Annotated[OrderSteps, Steps(shared=True, actor="Buyer")]

    Attributes:
        shared: Reuse a single instance for every shared field of the same type
            within one injection pass.
        unique_instance: Always create a fresh instance, even if a shared one exists.
            Takes precedence over ``shared``.
        actor: Explicit display name for the step library. When blank, the name is
            derived from the field name.
    """

    shared: bool = False
    unique_instance: bool = False
    actor: str = ""

    def explicit_actor_name(self) -> Optional[str]:
        if not self.actor or self.actor.isspace():
            return None
        return self.actor
