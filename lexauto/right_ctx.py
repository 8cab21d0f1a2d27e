"""Right contexts: limited lookahead checked after a rule's regex matches.

A rule may have at most one right context. After the rule's regex matches,
the right context's DFA is run on the rest of the input; the rule counts as
a match only if that DFA accepts.
"""

from __future__ import annotations

from typing import Iterator, Mapping, Optional

from .dfa import DFA, nfa_to_dfa
from .nfa import NFA
from .pattern import Regex


class RightCtxDFAs:
    """The DFAs of all right contexts, addressed by integer index."""

    def __init__(self) -> None:
        self._dfas: list[DFA[None]] = []

    def new_right_ctx(
        self, bindings: Optional[Mapping[str, Regex]], regex: Regex
    ) -> int:
        """Compile ``regex`` into a right-context DFA and return its index."""
        nfa: NFA[None] = NFA()
        nfa.add_regex(bindings, regex, None, None)
        self._dfas.append(nfa_to_dfa(nfa))
        return len(self._dfas) - 1

    def __getitem__(self, idx: int) -> DFA[None]:
        return self._dfas[idx]

    def __iter__(self) -> Iterator[DFA[None]]:
        return iter(self._dfas)

    def __len__(self) -> int:
        return len(self._dfas)