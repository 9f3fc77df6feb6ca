"""
Tests for the Creature agent.
"""

import logging
import random

import numpy as np
import pytest

from creatures import Creature, CreatureConfig, CreatureIdleState, CreatureMoveState, EggState
from shared.constants import EAT_CUE, EGG_VISUAL, HATCH_CUE, HUNGRY, LAST_BELL, MAX_HUNGER
from shared.messages import GameEventType, create_event


@pytest.fixture
def creature(scheduler, event_log, environment, presentation):
    return Creature(
        scheduler,
        event_log,
        environment,
        presentation,
        config=CreatureConfig(egg_seconds=(1.0, 1.0), idle_seconds=(1.0, 1.0)),
        position=(1.0, 0.0, 1.0),
        creature_visuals=("blob_test",),
        rng=random.Random(5),
        creature_id="creature-test",
    )


class TestCreatureSetup:
    """Tests for construction and configuration faults."""

    def test_defaults(self, creature):
        assert creature.id == "creature-test"
        assert creature.visual == "blob_test"
        assert np.allclose(creature.position, [1.0, 0.0, 1.0])
        assert creature.current_state_name is None

    def test_generated_id(self, scheduler, event_log, environment, presentation):
        creature = Creature(scheduler, event_log, environment, presentation)
        assert creature.id.startswith("creature-")
        assert creature.visual in ("blob_green", "blob_pink", "blob_blue")

    @pytest.mark.parametrize("missing", ["scheduler", "event_log", "environment", "presentation"])
    def test_missing_collaborator(self, scheduler, event_log, environment, presentation, missing):
        """Test a missing collaborator aborts construction."""
        kwargs = {
            "scheduler": scheduler,
            "event_log": event_log,
            "environment": environment,
            "presentation": presentation,
        }
        kwargs[missing] = None
        with pytest.raises(ValueError, match=missing):
            Creature(**kwargs)

    def test_empty_visuals(self, scheduler, event_log, environment, presentation):
        with pytest.raises(ValueError):
            Creature(scheduler, event_log, environment, presentation, creature_visuals=())

    def test_invalid_config(self, scheduler, event_log, environment, presentation):
        with pytest.raises(ValueError, match="step_distance"):
            Creature(
                scheduler,
                event_log,
                environment,
                presentation,
                config=CreatureConfig(step_distance=0),
            )

    def test_registers_all_states(self, creature):
        assert set(creature.state_machine.states) == {
            "EggState",
            "CreatureIdleState",
            "CreatureHungryState",
            "CreatureMoveState",
        }

    def test_start_as_egg(self, creature, presentation):
        creature.start()
        assert creature.current_state_name == EggState.__name__
        assert presentation.is_visible(f"creature-test:{EGG_VISUAL}")


class TestEventHandling:
    """Tests for turning events into blackboard signals."""

    def test_bell_sets_last_bell(self, creature):
        creature.handle_event(create_event(GameEventType.BELL, (3.0, 0.0, 4.0)))
        assert np.allclose(creature.state_machine.blackboard.get(LAST_BELL), [3.0, 0.0, 4.0])

    def test_food_sets_hungry(self, creature):
        creature.handle_event(create_event(GameEventType.FOOD, (2.0, 0.0, 2.0)))
        assert np.allclose(creature.state_machine.blackboard.get(HUNGRY), [2.0, 0.0, 2.0])

    def test_unknown_event_logged_and_dropped(self, creature, caplog):
        """Test an unrecognized event is logged and ignored."""
        with caplog.at_level(logging.ERROR, logger="creatures.creature"):
            creature.handle_event(create_event(GameEventType.NONE, (0.0, 0.0, 0.0)))

        assert "Unhandled event" in caplog.text
        assert len(creature.state_machine.blackboard) == 0

    def test_update_polls_event_log(self, creature, event_log):
        """Test each update drains new events from the log."""
        creature.start()
        event = event_log.append(GameEventType.BELL, (0.0, 0.0, 5.0))

        creature.update()
        assert LAST_BELL in creature.state_machine.blackboard
        assert event_log.cursor("creature-test") == event.id

        creature.state_machine.blackboard.clear()
        creature.update()
        assert LAST_BELL not in creature.state_machine.blackboard

    def test_events_before_creation_are_seen(self, scheduler, event_log, environment, presentation):
        """Test a new creature catches up on events still in the log."""
        event_log.append(GameEventType.FOOD, (1.0, 0.0, 0.0))
        creature = Creature(scheduler, event_log, environment, presentation, creature_id="late")
        creature.start()
        creature.update()
        assert HUNGRY in creature.state_machine.blackboard


class TestCreatureLife:
    """Tests for a creature driven tick by tick."""

    @pytest.mark.asyncio
    async def test_hatch_idle_and_answer_bell(
        self, clock, scheduler, creature, event_log, presentation, settle
    ):
        """Test a creature hatches, idles, and hops to a bell."""
        creature.start()

        async def step(ticks: int = 1) -> None:
            for _ in range(ticks):
                clock.advance(0.05)
                scheduler.tick()
                creature.update()
                await settle()

        await step(25)
        assert HATCH_CUE in [c.split(":")[-1] for c in presentation.cue_history]
        assert creature.current_state_name == CreatureIdleState.__name__

        event_log.append(GameEventType.BELL, (1.0, 0.0, 4.0))
        await step(2)
        assert creature.current_state_name == CreatureMoveState.__name__

        for _ in range(400):
            if creature.current_state_name == CreatureIdleState.__name__:
                break
            await step()

        assert creature.current_state_name == CreatureIdleState.__name__
        assert np.allclose(creature.position, [1.0, 0.0, 4.0])
        await scheduler.close()

    def test_summary_and_state(self, creature):
        creature.start()
        summary = creature.summary()
        assert summary["id"] == "creature-test"
        assert summary["state"] == "EggState"
        assert creature.get_state()["visual"] == "blob_test"


class TestHunger:
    """Tests for the hunger meter."""

    def test_hunger_builds_over_time(self, clock, creature):
        creature.start()
        assert creature.hunger == 0.0

        clock.advance(10.0)
        creature.update()
        assert creature.hunger == pytest.approx(5.0)

    def test_hunger_is_capped(self, clock, creature):
        creature.start()
        clock.advance(10_000.0)
        creature.update()
        assert creature.hunger == MAX_HUNGER

    def test_eat_lowers_hunger_but_not_below_zero(self, clock, creature, presentation):
        """Test a meal removes the food value and never drives hunger negative."""
        creature.start()
        clock.advance(30.0)
        creature.update()

        creature.eat()
        assert creature.hunger == pytest.approx(5.0)
        assert f"creature-test:{EAT_CUE}" in presentation.cue_history

        creature.eat()
        assert creature.hunger == 0.0

    @pytest.mark.asyncio
    async def test_reaching_food_eats_it(
        self, clock, scheduler, creature, event_log, presentation, settle
    ):
        """Test a hungry creature hops to the food and eats once it lands."""
        creature.start()

        async def step(ticks: int = 1) -> None:
            for _ in range(ticks):
                clock.advance(0.05)
                scheduler.tick()
                creature.update()
                await settle()

        await step(25)
        event_log.append(GameEventType.FOOD, (1.0, 0.0, 3.0))
        await step(2)
        assert creature.current_state_name == "CreatureHungryState"

        for _ in range(600):
            if f"creature-test:{EAT_CUE}" in presentation.cue_history:
                break
            await step()

        assert f"creature-test:{EAT_CUE}" in presentation.cue_history
        assert np.allclose(creature.position, [1.0, 0.0, 3.0])
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_bell_answered_without_eating(
        self, clock, scheduler, creature, event_log, presentation, settle
    ):
        """Test arriving at a bell does not count as a meal."""
        creature.start()

        async def step(ticks: int = 1) -> None:
            for _ in range(ticks):
                clock.advance(0.05)
                scheduler.tick()
                creature.update()
                await settle()

        await step(25)
        event_log.append(GameEventType.BELL, (1.0, 0.0, 2.0))
        for _ in range(400):
            await step()
            if np.allclose(creature.position, [1.0, 0.0, 2.0]):
                break

        assert f"creature-test:{EAT_CUE}" not in presentation.cue_history
        await scheduler.close()
