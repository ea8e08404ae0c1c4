"""Step library injection for test cases.

Stepwire populates the step library fields of test cases. A field is marked by
annotating its type with :class:`~stepwire.markers.Steps`; injecting a test case
creates an instance of the declared type for each marked field, populates the
marked fields of those step libraries in turn, and names each one after the
actor it represents.

Key Features:
    - Declarative fields using standard ``typing.Annotated`` type hints
    - Shared step libraries, created once per test case and reused across fields
    - Unique instances that are never shared
    - Recursive injection into nested step libraries with cycle detection
    - Actor names derived from field names, or given explicitly

Basic Usage:
    >>> from typing import Annotated
    >>> from stepwire.builders import inject_steps
    >>> from stepwire.library import StepLibrary
    >>> from stepwire.markers import Steps
    >>>
    >>> class OrderSteps(StepLibrary):
    ...     pass
    >>>
    >>> class CheckoutTest:
    ...     order_processor: Annotated[OrderSteps, Steps(shared=True)]
    >>>
    >>> test = CheckoutTest()
    >>> context = inject_steps(test)
    >>> test.order_processor.actor
    'Order Processor'

The library consists of several core modules:
    - markers: The Steps marker
    - fields: Discovery of marked fields and access to their values
    - policy: Whether a field gets a new, shared or no instance
    - injector: Recursive injection passes
    - actors: Actor name binding
    - builders: High-level injection functions
    - settings: Configuration from file and environment
    - errors: Library-specific exceptions
"""
