"""Deterministic finite automata and subset construction from an NFA."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from .nfa import NFA, AcceptingState
from .range_map import Range, RangeMap

A = TypeVar("A")


def _union(first: frozenset[int], second: frozenset[int]) -> frozenset[int]:
    return first | second


@dataclass
class _State(Generic[A]):
    char_transitions: dict[str, int] = field(default_factory=dict)
    range_transitions: RangeMap[int] = field(default_factory=RangeMap)
    any_transition: Optional[int] = None
    end_of_input_transition: Optional[int] = None
    accepting: list[AcceptingState[A]] = field(default_factory=list)


class DFA(Generic[A]):
    """A DFA whose accepting states carry an ordered list of accepting values.

    States are integers; state 0 is the initial state. A state may hold
    several accepting values, in rule order; the first whose right context
    matches wins.
    """

    initial_state = 0

    def __init__(self) -> None:
        self._states: list[_State[A]] = [_State()]

    def __len__(self) -> int:
        return len(self._states)

    def new_state(self) -> int:
        """Add a state without transitions and return its index."""
        self._states.append(_State())
        return len(self._states) - 1

    def make_state_accepting(self, state: int, value: AcceptingState[A]) -> None:
        """Append an accepting value to ``state``."""
        self._states[state].accepting.append(value)

    def add_char_transition(self, state: int, char: str, next_state: int) -> None:
        transitions = self._states[state].char_transitions
        if char in transitions:
            raise ValueError(f"state {state} already has a transition on {char!r}")
        transitions[char] = next_state

    def set_range_transitions(self, state: int, ranges: RangeMap[int]) -> None:
        self._states[state].range_transitions = ranges

    def set_any_transition(self, state: int, next_state: int) -> None:
        target = self._states[state]
        if target.any_transition is not None:
            raise ValueError(f"state {state} already has an any transition")
        target.any_transition = next_state

    def set_end_of_input_transition(self, state: int, next_state: int) -> None:
        target = self._states[state]
        if target.end_of_input_transition is not None:
            raise ValueError(f"state {state} already has an end-of-input transition")
        target.end_of_input_transition = next_state

    def accepting(self, state: int) -> tuple[AcceptingState[A], ...]:
        """Accepting values of ``state`` in rule order; empty if not accepting."""
        return tuple(self._states[state].accepting)

    def next_state(self, state: int, char: str) -> Optional[int]:
        """The state reached from ``state`` on ``char``, or None if stuck.

        Character transitions take precedence over ranges, and ranges over
        the any-character transition.
        """
        current = self._states[state]
        target = current.char_transitions.get(char)
        if target is not None:
            return target
        code = ord(char)
        for rng in current.range_transitions:
            if rng.start > code:
                break
            if code <= rng.end:
                return rng.value
        return current.any_transition

    def end_of_input_state(self, state: int) -> Optional[int]:
        """The state reached from ``state`` at end of input, or None."""
        return self._states[state].end_of_input_transition


def nfa_to_dfa(nfa: NFA[A]) -> DFA[A]:
    """Build an equivalent DFA by subset construction."""
    dfa: DFA[A] = DFA()
    initial = nfa.compute_state_closure({nfa.initial_state})

    state_map: dict[frozenset[int], int] = {initial: dfa.initial_state}
    work_list: list[frozenset[int]] = [initial]
    finished: set[int] = set()

    def dfa_state_of(states: frozenset[int]) -> int:
        existing = state_map.get(states)
        if existing is None:
            existing = dfa.new_state()
            state_map[states] = existing
        return existing

    while work_list:
        current_nfa_states = work_list.pop()
        current = dfa_state_of(current_nfa_states)
        if current in finished:
            continue
        finished.add(current)

        char_transitions: dict[str, set[int]] = {}
        range_transitions: RangeMap[frozenset[int]] = RangeMap()
        any_transitions: set[int] = set()
        end_of_input_transitions: set[int] = set()

        for nfa_state in sorted(current_nfa_states):
            accepting = nfa.accepting(nfa_state)
            if accepting is not None:
                dfa.make_state_accepting(current, accepting)

            for char, targets in nfa.char_transitions(nfa_state):
                char_transitions.setdefault(char, set()).update(targets)

            for rng in nfa.range_transitions(nfa_state):
                range_transitions.insert(rng.start, rng.end, rng.value, _union)

            any_transitions |= nfa.any_transitions(nfa_state)
            end_of_input_transitions |= nfa.end_of_input_transitions(nfa_state)

        for char in sorted(char_transitions):
            char_states = char_transitions[char]
            # Ranges and `_` covering this char must also be followed.
            for rng in range_transitions:
                if rng.contains(char):
                    char_states |= rng.value
            char_states |= any_transitions

            closure = nfa.compute_state_closure(char_states)
            dfa.add_char_transition(current, char, dfa_state_of(closure))
            work_list.append(closure)

        dfa_ranges: list[Range[int]] = []
        for rng in range_transitions:
            closure = nfa.compute_state_closure(rng.value | any_transitions)
            dfa_ranges.append(Range(rng.start, rng.end, dfa_state_of(closure)))
            work_list.append(closure)
        dfa.set_range_transitions(current, RangeMap.from_sorted(dfa_ranges))

        closure = nfa.compute_state_closure(any_transitions)
        if closure:
            dfa.set_any_transition(current, dfa_state_of(closure))
            work_list.append(closure)

        closure = nfa.compute_state_closure(end_of_input_transitions)
        if closure:
            dfa.set_end_of_input_transition(current, dfa_state_of(closure))
            work_list.append(closure)

    return dfa