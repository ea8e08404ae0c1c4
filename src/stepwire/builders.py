"""High level entry points for injecting step libraries."""

from typing import Optional, Any

from stepwire.injector import StepInjector
from stepwire.policy import InjectionContext
from stepwire.settings import InjectionSettings

__all__ = ["inject_steps", "inject_optional_steps"]


def inject_steps(
    test_case: Any, settings: Optional[InjectionSettings] = None
) -> InjectionContext:
    """Instantiate every Steps field of ``test_case`` and of its step libraries.

    Args:
        test_case: The test case instance to populate.
        settings: Injection settings. If None, they are loaded from the settings
            file and environment, and applied to the ``stepwire`` logger.

    Returns:
        The :class:`InjectionContext` holding the shared step libraries of the test case.

    Raises:
        ConfigurationError: If the test case declares no Steps field, or step
            libraries are nested in a cycle.
        InvalidFieldError: If a field cannot be instantiated or assigned.

    Example:
        >>> class CheckoutTest:
        ...     buyer: Annotated[OrderSteps, Steps(shared=True)]
        >>>
        >>> test = CheckoutTest()
        >>> context = inject_steps(test)
        >>> test.buyer.actor
        'Buyer'
    """
    return StepInjector(settings or _loaded_settings()).inject_into(test_case)


def inject_optional_steps(
    target: Any, settings: Optional[InjectionSettings] = None
) -> InjectionContext:
    """Like :func:`inject_steps`, but an object with no Steps fields is left unchanged."""
    return StepInjector(settings or _loaded_settings()).inject_optional_into(target)


def _loaded_settings() -> InjectionSettings:
    settings = InjectionSettings.load()
    settings.configure_logging()
    return settings
