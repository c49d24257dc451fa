from __future__ import annotations

from conftest import FakeLLM, call, reply

from forge.executor import Failure, TurnExecutor
from forge.parser import Action
from forge.planner import Planner
from forge.prompts import RECOVERY, build_instruction
from forge.recovery import RecoveryController, RecoveryStatus, format_error_turn

READ_MISSING = reply("Reading the file.", [call("read", "missing.txt", description="Read missing.txt")])
DONE = reply("Nothing more to do.", [])


def error_turns(agent) -> list[str]:
    return [t.text for t in agent.conversation if t.text.startswith("ERROR: ")]


def test_read_missing_file_gives_up_after_max_retries(make_agent) -> None:
    llm = FakeLLM([READ_MISSING, READ_MISSING, READ_MISSING, DONE])
    agent = make_agent(llm)

    outcome = agent.handle("read missing.txt")

    # turn 1 + two recovery plans + turn 2
    assert len(llm.calls) == 4
    [recovery] = outcome.recoveries
    assert recovery.status == RecoveryStatus.ABANDONED
    assert recovery.planning_calls == 2
    assert recovery.depth == 2
    assert outcome.completed

    errors = error_turns(agent)
    assert len(errors) == 2
    assert errors[0] == (
        "ERROR: The tool call 'read' with args [\"missing.txt\"] failed with error: "
        "File not found: missing.txt\n\n"
        "Please analyze why this failed and try a different approach."
    )

    recovery_instruction = build_instruction(RECOVERY, agent.tools.usage_lines())
    assert [t.text for t in agent.conversation].count(recovery_instruction) == 2


def test_recovery_that_succeeds(make_agent, tmp_path) -> None:
    fix = reply("Create it first.", [call("write", "missing.txt", "hello", "world")])
    llm = FakeLLM([READ_MISSING, fix, DONE])
    agent = make_agent(llm)

    outcome = agent.handle("read missing.txt")

    assert outcome.recoveries[0].status == RecoveryStatus.RECOVERED
    assert outcome.recoveries[0].planning_calls == 1
    assert (tmp_path / "missing.txt").read_text() == "hello world"
    assert len(llm.calls) == 3


def test_no_alternative_stops_the_chain(make_agent) -> None:
    llm = FakeLLM([READ_MISSING, reply("I cannot find another way.", []), DONE])
    agent = make_agent(llm)

    outcome = agent.handle("read missing.txt")

    assert outcome.recoveries[0].status == RecoveryStatus.NO_ALTERNATIVE
    assert outcome.recoveries[0].planning_calls == 1
    assert len(llm.calls) == 3


def test_exceeded_depth_makes_no_inference_call(echo_registry, conversation, display) -> None:
    llm = FakeLLM()
    planner = Planner(llm, conversation, display, "system")
    executor = TurnExecutor(echo_registry, conversation, display, max_retries=2)
    controller = RecoveryController(planner, executor, conversation, display,
                                    echo_registry.usage_lines(), max_retries=2)

    failure = Failure(action=Action("echo", ("bad",), "echo"), error="cannot echo bad", depth=2)
    outcome = controller.recover(failure)

    assert outcome.status == RecoveryStatus.ABANDONED
    assert outcome.planning_calls == 0
    assert llm.calls == []
    # the error is still recorded for the model
    assert conversation.last.text == format_error_turn(failure)


def test_chain_never_exceeds_retry_budget(echo_registry, echo_tool, conversation, display) -> None:
    always_bad = reply("Try again.", [call("echo", "bad")])
    llm = FakeLLM(default=always_bad)
    planner = Planner(llm, conversation, display, "system")
    executor = TurnExecutor(echo_registry, conversation, display, max_retries=3)
    controller = RecoveryController(planner, executor, conversation, display,
                                    echo_registry.usage_lines(), max_retries=3)

    failure = Failure(action=Action("echo", ("bad",), "echo"), error="cannot echo bad", depth=0)
    outcome = controller.recover(failure)

    assert outcome.status == RecoveryStatus.ABANDONED
    assert outcome.planning_calls == 3
    assert len(llm.calls) == 3
    assert len(echo_tool.invocations) == 3


def test_failed_recovery_attempt_recovers_one_level_deeper(echo_registry, echo_tool, conversation, display) -> None:
    llm = FakeLLM([
        reply("Try this.", [call("echo", "bad")]),
        reply("Try that.", [call("echo", "good")]),
    ])
    planner = Planner(llm, conversation, display, "system")
    executor = TurnExecutor(echo_registry, conversation, display, max_retries=2)
    controller = RecoveryController(planner, executor, conversation, display,
                                    echo_registry.usage_lines(), max_retries=2)

    failure = Failure(action=Action("echo", ("bad",), "echo"), error="cannot echo bad", depth=0)
    outcome = controller.recover(failure)

    assert outcome.status == RecoveryStatus.RECOVERED
    assert outcome.planning_calls == 2
    assert outcome.depth == 2
    assert echo_tool.invocations == [["bad"], ["good"]]
    errors = [t.text for t in conversation if t.text.startswith("ERROR: ")]
    assert len(errors) == 2
