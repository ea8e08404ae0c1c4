from typing import Annotated

import pytest

from stepwire.actors import HasActorName, actor_name_for, assign_actor_name_in
from stepwire.errors import InvalidFieldError
from stepwire.fields import find_optional_annotated_fields
from stepwire.injector import StepInjector
from stepwire.library import StepLibrary
from stepwire.markers import Steps
from stepwire.naming import humanize


class ActorBase:
    actor: str = ""


class OrderSteps(ActorBase):
    pass


class NotAStringActorBase:
    actor: int = 0


class CountingSteps(NotAStringActorBase):
    pass


class GrandchildSteps(OrderSteps):
    pass


class OwnActorSteps:
    actor: str = ""


class ReadOnlyActorBase:
    __slots__ = ()
    actor: str


class ReadOnlySteps(ReadOnlyActorBase):
    __slots__ = ()


class RecordingSteps:
    def __init__(self):
        self.names = []

    def set_actor_name(self, name: str) -> None:
        self.names.append(name)


class RefusingSteps:
    def set_actor_name(self, name: str) -> None:
        raise ValueError("no names here")


class ServiceB:
    pass


class ServiceA:
    service_b: Annotated[ServiceB, Steps(shared=True)]


class ServiceScenario:
    service_a: Annotated[ServiceA, Steps(shared=True)]


class ActorScenario:
    order_processor: Annotated[OrderSteps, Steps()]
    buyer_steps: Annotated[OrderSteps, Steps(actor="Buyer")]
    counting: Annotated[CountingSteps, Steps()]
    grandchild: Annotated[GrandchildSteps, Steps()]
    own_actor: Annotated[OwnActorSteps, Steps()]
    read_only: Annotated[ReadOnlySteps, Steps()]
    recording: Annotated[RecordingSteps, Steps(actor="Recorder")]
    refusing: Annotated[RefusingSteps, Steps()]


@pytest.fixture
def field_named():
    fields = {f.name: f for f in find_optional_annotated_fields(ActorScenario)}
    return fields.__getitem__


@pytest.mark.parametrize(
    "identifier, expected",
    [
        ("orderProcessor", "Order Processor"),
        ("order_processor", "Order Processor"),
        ("orderService", "Order Service"),
        ("HTTPClient", "HTTP Client"),
        ("user_ID", "User ID"),
        ("_private_steps", "Private Steps"),
        ("buyer2", "Buyer 2"),
        ("", ""),
    ],
)
def test_humanize(identifier, expected):
    assert humanize(identifier) == expected


def test_actor_name_is_derived_from_field_name(field_named):
    steps = OrderSteps()

    assign_actor_name_in(field_named("order_processor"), steps)

    assert steps.actor == "Order Processor"


def test_explicit_actor_name_takes_precedence(field_named):
    steps = OrderSteps()

    assign_actor_name_in(field_named("buyer_steps"), steps)

    assert actor_name_for(field_named("buyer_steps")) == "Buyer"
    assert steps.actor == "Buyer"


def test_actor_field_must_be_a_string(field_named):
    steps = CountingSteps()

    assign_actor_name_in(field_named("counting"), steps)

    assert steps.actor == 0


def test_actor_field_is_only_looked_up_on_the_direct_superclass(field_named):
    grandchild = GrandchildSteps()
    own_actor = OwnActorSteps()

    assign_actor_name_in(field_named("grandchild"), grandchild)
    assign_actor_name_in(field_named("own_actor"), own_actor)

    assert grandchild.actor == ""
    assert own_actor.actor == ""


def test_unwritable_actor_field_raises(field_named):
    with pytest.raises(InvalidFieldError, match="ReadOnlyActorBase.actor") as e:
        assign_actor_name_in(field_named("read_only"), ReadOnlySteps())

    assert e.value.owner is ReadOnlyActorBase


def test_actor_name_capability_is_preferred(field_named):
    steps = RecordingSteps()

    assert isinstance(steps, HasActorName)
    assign_actor_name_in(field_named("recording"), steps)

    assert steps.names == ["Recorder"]


def test_failing_actor_name_capability_raises(field_named):
    with pytest.raises(InvalidFieldError, match="ActorScenario.refusing"):
        assign_actor_name_in(field_named("refusing"), RefusingSteps())


def test_step_library_base_class_receives_actor_name():
    class Checkout:
        shopper: Annotated[StepLibrary, Steps()]

    checkout = Checkout()
    StepInjector().inject_into(checkout)

    assert checkout.shopper.actor == "Shopper"


def test_nested_injection_without_actor_field():
    scenario = ServiceScenario()

    StepInjector().inject_into(scenario)

    assert scenario.service_a is not None
    assert scenario.service_a.service_b is not None
    assert not hasattr(scenario.service_a.service_b, "actor")
    assert not hasattr(scenario.service_a, "actor")
