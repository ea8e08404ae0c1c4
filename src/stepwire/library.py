"""Base class for step libraries."""

__all__ = ["StepLibrary"]


class StepLibrary:
    """Convenience base class for step libraries.

    Subclasses inherit the ``actor`` field, which is set to the actor name of
    the field a step library is injected into:

        >>> class OrderSteps(StepLibrary):
        ...     def places_an_order(self):
        ...         print(f"{self.actor} places an order")
    """

    actor: str = ""

    def set_actor_name(self, name: str) -> None:
        self.actor = name
