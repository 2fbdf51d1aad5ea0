from branchtale.domain.defs import MemoryMutation, OptionConditionDef, OptionEffectDef
from branchtale.domain.state import GameContext
from branchtale.services.memory_rules import (
    apply_mutations,
    apply_option_effects,
    condition_holds,
    find_unknown_option_id,
    is_eligible,
)


def test_option_without_conditions_is_eligible() -> None:
    conditions = [OptionConditionDef(option_id="other", required_flags=["never"])]

    assert is_eligible("free", conditions, GameContext())


def test_condition_requirements() -> None:
    context = GameContext()
    context.set_flag("got_key")
    context.set_value("guard", "asleep")
    condition = OptionConditionDef(
        option_id="open_gate",
        required_flags=["got_key"],
        forbidden_flags=["alarm"],
        required_values=[("guard", "asleep")],
        required_missing_values=["curse"],
    )

    assert condition_holds(condition, context)

    context.set_flag("alarm")
    assert not condition_holds(condition, context)
    context.clear_flag("alarm")

    context.set_value("guard", "awake")
    assert not condition_holds(condition, context)
    context.erase_value("guard")
    assert not condition_holds(condition, context)
    context.set_value("guard", "asleep")

    context.set_value("curse", "")
    assert not condition_holds(condition, context)


def test_eligibility_is_conjunction_of_all_matching_blocks() -> None:
    context = GameContext()
    context.set_flag("lamp")
    conditions = [
        OptionConditionDef(option_id="descend", required_flags=["lamp"]),
        OptionConditionDef(option_id="descend", required_flags=["rope"]),
    ]

    assert not is_eligible("descend", conditions, context)
    context.set_flag("rope")
    assert is_eligible("descend", conditions, context)


def test_apply_mutations_in_order() -> None:
    context = GameContext()
    apply_mutations(
        [
            MemoryMutation(kind="add_flag", key="lit"),
            MemoryMutation(kind="set_value", key="room", value="hall"),
            MemoryMutation(kind="set_value", key="room", value="vault"),
            MemoryMutation(kind="clear_flag", key="lit"),
            MemoryMutation(kind="add_flag", key="done"),
            MemoryMutation(kind="erase_value", key="missing"),
        ],
        context,
    )

    assert context.memory_flags == {"done"}
    assert context.memory_values == {"room": "vault"}


def test_apply_option_effects_only_for_target_id() -> None:
    context = GameContext()
    effects = [
        OptionEffectDef(option_id="take", mutations=[MemoryMutation(kind="set_value", key="count", value="1")]),
        OptionEffectDef(option_id="leave", mutations=[MemoryMutation(kind="add_flag", key="left")]),
        OptionEffectDef(option_id="take", mutations=[MemoryMutation(kind="set_value", key="count", value="2")]),
    ]

    apply_option_effects("take", effects, context)

    assert context.memory_values == {"count": "2"}
    assert not context.has_flag("left")


def test_find_unknown_option_id_reports_first_offender() -> None:
    conditions = [OptionConditionDef(option_id="a"), OptionConditionDef(option_id="ghost")]
    effects = [OptionEffectDef(option_id="phantom", mutations=[MemoryMutation(kind="add_flag", key="x")])]

    assert find_unknown_option_id(["a"], conditions, effects) == "ghost"
    assert find_unknown_option_id(["a", "ghost"], conditions, effects) == "phantom"
    assert find_unknown_option_id(["a", "ghost", "phantom"], conditions, effects) is None
