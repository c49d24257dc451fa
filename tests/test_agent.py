from __future__ import annotations

import pytest
from conftest import FakeLLM, call, reply

from forge.agent import ProcessStatus
from forge.errors import NetworkError
from forge.prompts import FIRST_TURN, FOLLOW_UP, build_instruction
from forge.state import Role


def test_empty_action_list_on_first_turn_completes(make_agent, echo_registry, echo_tool) -> None:
    llm = FakeLLM([reply("Paris is the capital of France.", [])])
    agent = make_agent(llm, tools=echo_registry)

    outcome = agent.handle("What is the capital of France?")

    assert outcome.status == ProcessStatus.COMPLETE
    assert outcome.turns == 1
    assert len(llm.calls) == 1
    assert echo_tool.invocations == []


def test_plain_answer_without_marker_completes(make_agent, echo_registry) -> None:
    llm = FakeLLM(["Just an answer, no tools."])
    agent = make_agent(llm, tools=echo_registry)

    assert agent.handle("hi").completed


def test_turn_budget_bounds_planning_calls(make_agent, echo_registry, echo_tool) -> None:
    llm = FakeLLM(default=reply("More work.", [call("echo", "again")]))
    agent = make_agent(llm, tools=echo_registry, max_turns=5)

    outcome = agent.handle("never finish")

    assert outcome.status == ProcessStatus.MAX_TURNS
    assert outcome.turns == 5
    assert len(llm.calls) == 5
    assert len(echo_tool.invocations) == 5


def test_instructions_and_replies_stay_in_history(make_agent, echo_registry) -> None:
    first = reply("Echo something.", [call("echo", "hello", description="say hello")])
    second = reply("Done.", [])
    llm = FakeLLM([first, second])
    agent = make_agent(llm, tools=echo_registry)

    agent.handle("say hello")

    usage = echo_registry.usage_lines()
    turns = list(agent.conversation)
    assert [(t.role, t.text) for t in turns] == [
        (Role.USER, "say hello"),
        (Role.USER, build_instruction(FIRST_TURN, usage)),
        (Role.ASSISTANT, first),
        (Role.USER, "Tool execution results:\nsay hello: hello"),
        (Role.USER, build_instruction(FOLLOW_UP, usage)),
        (Role.ASSISTANT, second),
    ]
    # the second planning call saw the first reply and the results
    _, seen = llm.calls[1]
    assert first in seen
    assert seen[-1] == build_instruction(FOLLOW_UP, usage)


def test_history_carries_across_requests(make_agent, echo_registry) -> None:
    llm = FakeLLM([reply("ok", []), reply("ok again", [])])
    agent = make_agent(llm, tools=echo_registry)

    agent.handle("first request")
    agent.handle("second request")

    _, seen = llm.calls[1]
    assert seen[0] == "first request"
    assert "second request" in seen


def test_system_prompt_lists_tools_and_working_dir(make_agent, tmp_path) -> None:
    llm = FakeLLM([reply("ok", [])])
    agent = make_agent(llm)

    agent.handle("hi")

    system, _ = llm.calls[0]
    assert str(tmp_path) in system
    for usage in ("read <path>", "write <path> <content>", "bash <command>", "grep <pattern>"):
        assert usage in system


def test_malformed_reply_ends_request(make_agent, echo_registry, echo_tool) -> None:
    llm = FakeLLM(['I will echo.\n\nTOOL_CALLS:\n[{"tool": "echo", "args": ['])
    agent = make_agent(llm, tools=echo_registry)

    outcome = agent.handle("echo please")

    assert outcome.completed
    assert echo_tool.invocations == []


def test_network_error_propagates(make_agent, echo_registry) -> None:
    class DownLLM(FakeLLM):
        def infer(self, system_instructions, turns):
            raise NetworkError("connection refused")

    agent = make_agent(DownLLM(), tools=echo_registry)

    with pytest.raises(NetworkError):
        agent.handle("anything")
