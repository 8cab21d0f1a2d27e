"""Run NFAs and DFAs over an input string, splitting it into matches.

Both simulators implement the same longest-match semantics with
backtracking: when the automaton gets stuck, the last accepted match is
emitted and matching restarts right after it. A simulation returns the list
of ``(matched_text, value)`` pairs and the position where matching failed,
or None if the whole input was consumed.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from .dfa import DFA
from .nfa import NFA, AcceptingState
from .right_ctx import RightCtxDFAs

A = TypeVar("A")
S = TypeVar("S")

Matches = list[tuple[str, A]]
SimulationResult = tuple[Matches, Optional[int]]


def matches_right_ctx(dfa: DFA[None], text: str, pos: int) -> bool:
    """Whether the right-context ``dfa`` accepts a prefix of ``text[pos:]``.

    End of input counts as a match when the DFA has an end-of-input
    transition into an accepting state at that point.
    """
    state: Optional[int] = dfa.initial_state
    if dfa.accepting(state):
        return True
    for char in text[pos:]:
        state = dfa.next_state(state, char)
        if state is None:
            return False
        if dfa.accepting(state):
            return True
    eof_state = dfa.end_of_input_state(state)
    return eof_state is not None and bool(dfa.accepting(eof_state))


def _select(
    candidates: Iterable[AcceptingState[A]],
    ctxs: RightCtxDFAs,
    text: str,
    pos: int,
) -> Optional[AcceptingState[A]]:
    """The first candidate whose right context (if any) matches at ``pos``."""
    for candidate in candidates:
        if candidate.right_ctx is None or matches_right_ctx(
            ctxs[candidate.right_ctx], text, pos
        ):
            return candidate
    return None


def _run(
    text: str,
    initial: S,
    step: Callable[[S, str], Optional[S]],
    end_of_input: Callable[[S], Optional[S]],
    candidates: Callable[[S], Iterable[AcceptingState[A]]],
    ctxs: RightCtxDFAs,
) -> SimulationResult:
    matches: Matches = []
    # The skipped accepting match to fall back to when stuck: (start, value, end).
    last_match: Optional[tuple[int, A, int]] = None
    state: Optional[S] = initial
    match_start = 0
    pos = 0

    while True:
        while pos < len(text):
            char = text[pos]
            pos += 1
            state = step(state, char)

            if state is None:
                if last_match is None:
                    return matches, match_start
                start, value, end = last_match
                last_match = None
                matches.append((text[start:end], value))
                match_start = pos = end
                state = initial
            else:
                accepted = _select(candidates(state), ctxs, text, pos)
                if accepted is not None:
                    last_match = (match_start, accepted.value, pos)

        eof_state = end_of_input(state)
        if eof_state is not None:
            accepted = _select(candidates(eof_state), ctxs, text, pos)
            if accepted is not None:
                matches.append((text[match_start:], accepted.value))
                return matches, None

        if last_match is None:
            return matches, match_start

        start, value, end = last_match
        last_match = None
        matches.append((text[start:end], value))
        if end == len(text):
            return matches, None
        match_start = pos = end
        state = initial


def simulate_nfa(
    nfa: NFA[A], text: str, right_ctx_dfas: Optional[RightCtxDFAs] = None
) -> SimulationResult:
    """Split ``text`` into matches of the rules in ``nfa``."""
    ctxs = right_ctx_dfas if right_ctx_dfas is not None else RightCtxDFAs()

    def step(states: frozenset[int], char: str) -> Optional[frozenset[int]]:
        code = ord(char)
        next_states: set[int] = set()
        for state in states:
            for transition_char, targets in nfa.char_transitions(state):
                if transition_char == char:
                    next_states |= targets
            for rng in nfa.range_transitions(state):
                if rng.start <= code <= rng.end:
                    next_states |= rng.value
            next_states |= nfa.any_transitions(state)
        closure = nfa.compute_state_closure(next_states)
        return closure or None

    def end_of_input(states: frozenset[int]) -> Optional[frozenset[int]]:
        next_states: set[int] = set()
        for state in states:
            next_states |= nfa.end_of_input_transitions(state)
        closure = nfa.compute_state_closure(next_states)
        return closure or None

    def candidates(states: frozenset[int]) -> Iterable[AcceptingState[A]]:
        # Lower state indices belong to rules that come first.
        for state in sorted(states):
            accepting = nfa.accepting(state)
            if accepting is not None:
                yield accepting

    initial = nfa.compute_state_closure({nfa.initial_state})
    return _run(text, initial, step, end_of_input, candidates, ctxs)


def simulate_dfa(
    dfa: DFA[A], text: str, right_ctx_dfas: Optional[RightCtxDFAs] = None
) -> SimulationResult:
    """Split ``text`` into matches of the rules in ``dfa``."""
    ctxs = right_ctx_dfas if right_ctx_dfas is not None else RightCtxDFAs()
    return _run(
        text,
        dfa.initial_state,
        dfa.next_state,
        dfa.end_of_input_state,
        dfa.accepting,
        ctxs,
    )