"""Non-deterministic finite automata built from regular expressions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterable, Iterator, Mapping, Optional, TypeVar

from .pattern import (
    Any,
    Char,
    CharSet,
    Concat,
    Diff,
    EndOfInput,
    OneOrMore,
    Or,
    Regex,
    Str,
    Var,
    ZeroOrMore,
    ZeroOrOne,
)
from .range_map import Range, RangeMap

A = TypeVar("A")

MAX_CODE_POINT = 0x10FFFF


class CompileError(ValueError):
    """A regular expression cannot be compiled into an automaton."""


@dataclass(frozen=True)
class AcceptingState(Generic[A]):
    """The value of an accepting state and the right context it requires, if any."""

    value: A
    right_ctx: Optional[int] = None


@dataclass
class _State(Generic[A]):
    char_transitions: dict[str, set[int]] = field(default_factory=dict)
    range_transitions: RangeMap[frozenset[int]] = field(default_factory=RangeMap)
    empty_transitions: set[int] = field(default_factory=set)
    any_transitions: set[int] = field(default_factory=set)
    end_of_input_transitions: set[int] = field(default_factory=set)
    accepting: Optional[AcceptingState[A]] = None

    def has_transitions(self) -> bool:
        return bool(
            self.char_transitions
            or len(self.range_transitions)
            or self.empty_transitions
            or self.any_transitions
            or self.end_of_input_transitions
        )


def _union(first: frozenset[int], second: frozenset[int]) -> frozenset[int]:
    return first | second


def _keep(first: None, second: None) -> None:
    return None


def _format_set(states: Iterable[int]) -> str:
    return "{" + ", ".join(str(state) for state in sorted(states)) + "}"


class NFA(Generic[A]):
    """An NFA whose accepting states carry values of type ``A``.

    States are integers; state 0 is the initial state.
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

    def accepting(self, state: int) -> Optional[AcceptingState[A]]:
        """The accepting value of ``state``, or None if it is not accepting."""
        return self._states[state].accepting

    def char_transitions(self, state: int) -> Iterator[tuple[str, frozenset[int]]]:
        """Character transitions of ``state``, ordered by character."""
        transitions = self._states[state].char_transitions
        for char in sorted(transitions):
            yield char, frozenset(transitions[char])

    def range_transitions(self, state: int) -> Iterator[Range[frozenset[int]]]:
        """Range transitions of ``state``, sorted and non-overlapping."""
        return iter(self._states[state].range_transitions)

    def empty_transitions(self, state: int) -> frozenset[int]:
        return frozenset(self._states[state].empty_transitions)

    def any_transitions(self, state: int) -> frozenset[int]:
        return frozenset(self._states[state].any_transitions)

    def end_of_input_transitions(self, state: int) -> frozenset[int]:
        return frozenset(self._states[state].end_of_input_transitions)

    def add_regex(
        self,
        bindings: Optional[Mapping[str, Regex]],
        regex: Regex,
        right_ctx: Optional[int],
        value: A,
    ) -> None:
        """Add a rule: ``regex`` matched from the initial state accepts with ``value``."""
        accepting_state = self.new_state()
        self._make_state_accepting(accepting_state, value, right_ctx)
        regex_initial = self.new_state()
        self.add_empty_transition(self.initial_state, regex_initial)
        add_re(self, bindings or {}, regex, regex_initial, accepting_state)

    def add_char_transition(self, state: int, char: str, next_state: int) -> None:
        targets = self._states[state].char_transitions.setdefault(char, set())
        if next_state in targets:
            raise ValueError(
                f"duplicate character transition {state} --{char!r}--> {next_state}"
            )
        targets.add(next_state)

    def add_range_transition(
        self, state: int, start: str, end: str, next_state: int
    ) -> None:
        self._states[state].range_transitions.insert(
            ord(start), ord(end), frozenset({next_state}), _union
        )

    def add_range_transitions(
        self, state: int, ranges: RangeMap[object], next_state: int
    ) -> None:
        target = frozenset({next_state})
        self._states[state].range_transitions.insert_ranges(
            ranges.map(lambda _: target), _union
        )

    def add_empty_transition(self, state: int, next_state: int) -> None:
        self._add_unique(self._states[state].empty_transitions, next_state, "empty")

    def add_any_transition(self, state: int, next_state: int) -> None:
        self._add_unique(self._states[state].any_transitions, next_state, "any")

    def add_end_of_input_transition(self, state: int, next_state: int) -> None:
        self._add_unique(
            self._states[state].end_of_input_transitions, next_state, "end-of-input"
        )

    @staticmethod
    def _add_unique(targets: set[int], next_state: int, kind: str) -> None:
        if next_state in targets:
            raise ValueError(f"duplicate {kind} transition to {next_state}")
        targets.add(next_state)

    def _make_state_accepting(
        self, state: int, value: A, right_ctx: Optional[int]
    ) -> None:
        if self._states[state].accepting is not None:
            raise ValueError(f"state {state} is already accepting")
        self._states[state].accepting = AcceptingState(value, right_ctx)

    def compute_state_closure(self, states: Iterable[int]) -> frozenset[int]:
        """The given states together with everything reachable by empty transitions."""
        closure = set(states)
        worklist = list(closure)
        while worklist:
            state = worklist.pop()
            for next_state in self._states[state].empty_transitions:
                if next_state not in closure:
                    closure.add(next_state)
                    worklist.append(next_state)
        return frozenset(closure)

    def __str__(self) -> str:
        lines: list[str] = []
        for index, state in enumerate(self._states):
            if state.accepting is None:
                header = f"{index:>4}:"
            else:
                header = f"{'*' + str(index):>4}"
                if state.accepting.right_ctx is not None:
                    header += f" (ctx {state.accepting.right_ctx})"

            entries: list[str] = []
            if state.empty_transitions:
                entries.append(f"e -> {_format_set(state.empty_transitions)}")
            for char, targets in self.char_transitions(index):
                entries.append(f"{char!r} -> {_format_set(targets)}")
            for rng in state.range_transitions:
                entries.append(f"{rng.start} - {rng.end} -> {_format_set(rng.value)}")
            if state.any_transitions:
                entries.append(f"_ -> {_format_set(state.any_transitions)}")
            if state.end_of_input_transitions:
                entries.append(f"$ -> {_format_set(state.end_of_input_transitions)}")

            if not entries:
                lines.append(header + "\n")
                continue
            lines.append(header + entries[0] + "\n")
            lines.extend("     " + entry + "\n" for entry in entries[1:])
        return "".join(lines)


def _lookup(bindings: Mapping[str, Regex], var: Var) -> Regex:
    try:
        return bindings[var.name]
    except KeyError:
        raise CompileError(f"Unbound variable {var.name!r}") from None


def add_re(
    nfa: NFA[A],
    bindings: Mapping[str, Regex],
    regex: Regex,
    current: int,
    cont: int,
) -> None:
    """Add states and transitions so that ``regex`` leads from ``current`` to ``cont``."""
    match regex:
        case Var():
            add_re(nfa, bindings, _lookup(bindings, regex), current, cont)

        case Char(char=char):
            nfa.add_char_transition(current, char, cont)

        case Str(text=text):
            state = current
            for position, char in enumerate(text):
                next_state = cont if position == len(text) - 1 else nfa.new_state()
                nfa.add_char_transition(state, char, next_state)
                state = next_state

        case CharSet(items=items):
            for item in items:
                if isinstance(item, str):
                    nfa.add_char_transition(current, item, cont)
                else:
                    nfa.add_range_transition(current, item[0], item[1], cont)

        case ZeroOrMore(regex=inner):
            inner_init = nfa.new_state()
            inner_cont = nfa.new_state()
            add_re(nfa, bindings, inner, inner_init, inner_cont)
            nfa.add_empty_transition(current, cont)
            nfa.add_empty_transition(current, inner_init)
            nfa.add_empty_transition(inner_cont, cont)
            nfa.add_empty_transition(inner_cont, inner_init)

        case OneOrMore(regex=inner):
            inner_init = nfa.new_state()
            inner_cont = nfa.new_state()
            add_re(nfa, bindings, inner, inner_init, inner_cont)
            nfa.add_empty_transition(current, inner_init)
            nfa.add_empty_transition(inner_cont, cont)
            nfa.add_empty_transition(inner_cont, inner_init)

        case ZeroOrOne(regex=inner):
            inner_init = nfa.new_state()
            add_re(nfa, bindings, inner, inner_init, cont)
            nfa.add_empty_transition(current, cont)
            nfa.add_empty_transition(current, inner_init)

        case Concat(first=first, second=second):
            first_cont = nfa.new_state()
            add_re(nfa, bindings, first, current, first_cont)
            add_re(nfa, bindings, second, first_cont, cont)

        case Or(first=first, second=second):
            first_init = nfa.new_state()
            second_init = nfa.new_state()
            add_re(nfa, bindings, first, first_init, cont)
            add_re(nfa, bindings, second, second_init, cont)
            nfa.add_empty_transition(current, first_init)
            nfa.add_empty_transition(current, second_init)

        case Any():
            nfa.add_any_transition(current, cont)

        case EndOfInput():
            nfa.add_end_of_input_transition(current, cont)

        case Diff():
            nfa.add_range_transitions(current, regex_to_range_map(bindings, regex), cont)

        case _:
            raise CompileError(f"not a regular expression: {regex!r}")


def regex_to_range_map(bindings: Mapping[str, Regex], regex: Regex) -> RangeMap[None]:
    """The set of characters matched by a single-character ``regex``, as ranges."""
    match regex:
        case Var():
            return regex_to_range_map(bindings, _lookup(bindings, regex))

        case Char(char=char):
            range_map: RangeMap[None] = RangeMap()
            range_map.insert(ord(char), ord(char), None, _keep)
            return range_map

        case Str():
            raise CompileError("strings cannot be used in char sets (`#`)")

        case CharSet(items=items):
            range_map = RangeMap()
            for item in items:
                if isinstance(item, str):
                    range_map.insert(ord(item), ord(item), None, _keep)
                else:
                    range_map.insert(ord(item[0]), ord(item[1]), None, _keep)
            return range_map

        case ZeroOrMore():
            raise CompileError("`*` cannot be used in char sets (`#`)")

        case OneOrMore():
            raise CompileError("`+` cannot be used in char sets (`#`)")

        case ZeroOrOne():
            raise CompileError("`?` cannot be used in char sets (`#`)")

        case Concat():
            raise CompileError(
                "concatenation (`<re1> <re2>`) cannot be used in char sets (`#`)"
            )

        case Or(first=first, second=second):
            first_map = regex_to_range_map(bindings, first)
            first_map.insert_ranges(regex_to_range_map(bindings, second), _keep)
            return first_map

        case Any():
            range_map = RangeMap()
            range_map.insert(0, MAX_CODE_POINT, None, _keep)
            return range_map

        case EndOfInput():
            raise CompileError("`$` cannot be used in char sets (`#`)")

        case Diff(first=first, second=second):
            first_map = regex_to_range_map(bindings, first)
            first_map.remove_ranges(regex_to_range_map(bindings, second))
            return first_map

        case _:
            raise CompileError(f"not a regular expression: {regex!r}")