#!/usr/bin/env python3
"""
Executor tests: tape growth, loops, wrapping and runtime errors.
"""

import io
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from poopfuck import (
    ErrorKind,
    Executor,
    Instruction,
    Loop,
    PoopRuntimeError,
    RunOptions,
    Simple,
    execute,
    parse_source,
    run_string,
)

INC = Instruction.INCREMENT_VALUE.source
DEC = Instruction.DECREMENT_VALUE.source
RIGHT = Instruction.INCREMENT_POINTER.source
LEFT = Instruction.DECREMENT_POINTER.source
OUT = Instruction.OUTPUT.source
OPEN = Instruction.LOOP_START.source
CLOSE = Instruction.LOOP_END.source


def test_blank_program_outputs_nothing():
    result = run_string("  /* nothing here */\n")
    assert result.output == ""
    assert result.tape == (0,)
    assert result.steps == 0


def test_increment_then_output():
    assert run_string(INC + OUT).output == "\x01"


def test_cumulative_increment():
    assert run_string(INC * 65 + OUT).output == "A"


def test_countdown_loop_runs_three_times():
    """A [-] loop on a cell of 3 runs its body exactly three times."""
    state = execute([
        Simple(Instruction.INCREMENT_VALUE),
        Simple(Instruction.INCREMENT_VALUE),
        Simple(Instruction.INCREMENT_VALUE),
        Loop((Simple(Instruction.DECREMENT_VALUE),)),
    ])
    assert state.tape == [0]
    assert state.step_count == 3 + 3


def test_new_cells_are_zero():
    result = run_string(RIGHT + OUT)
    assert result.output == "\x00"
    assert result.tape == (0, 0)
    assert result.pointer == 1


def test_loop_retests_at_current_pointer():
    """The loop condition follows the pointer, it is not pinned to the entry cell."""
    # cells: [1, 1, 1, 0]; [>] walks right until the zero cell
    source = INC + RIGHT + INC + RIGHT + INC + LEFT + LEFT + OPEN + RIGHT + CLOSE + OUT
    result = run_string(source)
    assert result.pointer == 3
    assert result.tape == (1, 1, 1, 0)
    assert result.output == "\x00"


def test_skipped_loop_body():
    result = run_string(OPEN + INC + OUT + CLOSE)
    assert result.output == ""
    assert result.steps == 0


def test_eight_bit_wraparound():
    assert run_string(DEC + OUT).output == chr(255)
    assert run_string(INC * 256 + OUT).output == "\x00"


def test_cell_bits_option():
    result = run_string(DEC, options=RunOptions(cell_bits=16))
    assert result.tape == (65535,)


def test_unbounded_cells_without_wrap():
    result = run_string(INC * 300, options=RunOptions(wrap=False))
    assert result.tape == (300,)
    result = run_string(DEC, options=RunOptions(wrap=False))
    assert result.tape == (-1,)


def test_negative_output_without_wrap():
    with pytest.raises(PoopRuntimeError) as exc:
        run_string(DEC + OUT, options=RunOptions(wrap=False))
    assert exc.value.kind is ErrorKind.UNPRINTABLE_VALUE


def test_pointer_underflow():
    with pytest.raises(PoopRuntimeError) as exc:
        run_string(RIGHT + LEFT + LEFT)
    assert exc.value.kind is ErrorKind.POINTER_UNDERFLOW
    assert exc.value.pointer == 0


def test_output_written_before_failure_reaches_sink():
    sink = io.StringIO()
    with pytest.raises(PoopRuntimeError):
        run_string(INC * 66 + OUT + LEFT, sink=sink)
    assert sink.getvalue() == "B"


def test_input_in_tree_is_an_error():
    with pytest.raises(PoopRuntimeError) as exc:
        execute([Simple(Instruction.INPUT)])
    assert exc.value.kind is ErrorKind.UNSUPPORTED_INPUT


@pytest.mark.parametrize("instruction", [Instruction.LOOP_START, Instruction.LOOP_END])
def test_loop_markers_as_simple_nodes_are_undefined(instruction):
    with pytest.raises(PoopRuntimeError) as exc:
        execute([Simple(instruction)])
    assert exc.value.kind is ErrorKind.UNDEFINED_INSTRUCTION


def test_step_limit():
    # +[] never terminates
    program = parse_source(INC + OPEN + INC + DEC + CLOSE)
    with pytest.raises(PoopRuntimeError) as exc:
        execute(program, RunOptions(max_steps=100))
    assert exc.value.kind is ErrorKind.STEP_LIMIT_EXCEEDED


def test_executor_runs_are_independent():
    """Each run gets its own state; a later run leaves earlier results alone."""
    executor = Executor()
    first = executor.run(parse_source(INC * 3 + OUT))
    second = executor.run(parse_source(INC + RIGHT + INC + OUT))
    assert first is not second
    assert first.tape == [3]
    assert first.output == ["\x03"]
    assert second.tape == [1, 1]
    assert second.output == ["\x01"]
    assert executor.state is second


def test_state_reset():
    state = execute(parse_source(INC + RIGHT + INC + OUT))
    state.reset()
    assert state.tape == [0]
    assert state.pointer == 0
    assert state.output == []
    assert state.step_count == 0


def test_deeply_nested_loops():
    """Nesting far past the interpreter's recursion limit still runs."""
    depth = 5000
    assert run_string(OPEN * depth + CLOSE * depth + INC * 65 + OUT).output == "A"
    # every level is entered; the innermost body clears the cell
    program = INC + OPEN * depth + DEC + CLOSE * depth + INC * 66 + OUT
    result = run_string(program)
    assert result.output == "B"
    assert result.steps == 1 + 1 + 66 + 1


def test_state_snapshot_and_nonzero_cells():
    state = execute(parse_source(INC * 3 + RIGHT + RIGHT + INC))
    mem = state.snapshot()
    assert mem.tolist() == [3, 0, 1]
    assert state.nonzero_cells() == [(0, 3), (2, 1)]
