from __future__ import annotations

import json

from forge.parser import Action, parse_response, strip_fence

ACTIONS = [
    {"tool": "read", "args": ["src/main.py"], "description": "Read the entry point"},
    {"tool": "bash", "args": ["pytest", "-q"], "description": "Run the tests"},
]


def test_parse_splits_reasoning_and_actions() -> None:
    raw = "  I should look at main first.  \n\nTOOL_CALLS:\n" + json.dumps(ACTIONS)

    parsed = parse_response(raw)

    assert parsed.reasoning == "I should look at main first."
    assert parsed.diagnostic is None
    assert parsed.actions == [
        Action("read", ("src/main.py",), "Read the entry point"),
        Action("bash", ("pytest", "-q"), "Run the tests"),
    ]


def test_parse_matches_direct_decode() -> None:
    block = json.dumps(ACTIONS)
    parsed = parse_response(f"reasoning\nTOOL_CALLS:{block}")

    assert [a.to_dict() for a in parsed.actions] == json.loads(block)


def test_no_marker_means_direct_answer() -> None:
    raw = "The answer is 42.\nNo tools needed."

    parsed = parse_response(raw)

    assert parsed.reasoning == raw
    assert parsed.actions == []
    assert parsed.diagnostic is None


def test_fenced_block_parses_like_plain_block() -> None:
    block = json.dumps(ACTIONS, indent=2)
    plain = parse_response(f"plan\n\nTOOL_CALLS:\n{block}")
    json_fence = parse_response(f"plan\n\nTOOL_CALLS:\n```json\n{block}\n```")
    bare_fence = parse_response(f"plan\n\nTOOL_CALLS:\n```\n{block}\n```\n")
    one_line = parse_response(f"plan\n\nTOOL_CALLS: ```json{json.dumps(ACTIONS)}```")

    assert plain.actions
    assert json_fence.actions == plain.actions
    assert bare_fence.actions == plain.actions
    assert one_line.actions == plain.actions


def test_strip_fence_is_idempotent() -> None:
    block = json.dumps(ACTIONS)
    once = strip_fence(f"```json\n{block}\n```")

    assert once == block
    assert strip_fence(once) == once


def test_malformed_block_degrades_to_no_actions() -> None:
    raw = 'Let me read it.\n\nTOOL_CALLS:\n[{"tool": "read", "args": ["a.txt"'

    parsed = parse_response(raw)

    assert parsed.actions == []
    assert parsed.reasoning == raw
    assert parsed.diagnostic.startswith("Failed to parse tool calls:")
    assert '"args": ["a.txt"' in parsed.diagnostic


def test_wrong_shapes_degrade_to_no_actions() -> None:
    for block in ('{"tool": "read"}', '["read"]', '[{"args": ["x"]}]', '[{"tool": "read", "args": "x"}]'):
        raw = f"reasoning\nTOOL_CALLS:\n{block}"
        parsed = parse_response(raw)
        assert parsed.actions == [], block
        assert parsed.reasoning == raw
        assert parsed.diagnostic is not None


def test_missing_fields_default_and_values_become_strings() -> None:
    parsed = parse_response('x\nTOOL_CALLS:\n[{"tool": "read", "args": ["f.txt", 10, 5]}, {"tool": "glob"}]')

    assert parsed.actions == [
        Action("read", ("f.txt", "10", "5"), ""),
        Action("glob", (), ""),
    ]


def test_empty_list_and_parse_failure_are_indistinguishable() -> None:
    # Known ambiguity: "task complete" and an unreadable block both yield no
    # actions, so the loop stops either way. Only the diagnostic differs.
    done = parse_response("All finished.\n\nTOOL_CALLS:\n[]")
    broken = parse_response("All finished.\n\nTOOL_CALLS:\n[oops")

    assert done.actions == broken.actions == []
    assert not done.has_actions and not broken.has_actions
    assert done.diagnostic is None
    assert broken.diagnostic is not None


def test_parse_is_deterministic() -> None:
    raw = "r\nTOOL_CALLS:\n" + json.dumps(ACTIONS)

    assert parse_response(raw) == parse_response(raw)
