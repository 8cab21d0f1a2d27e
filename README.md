# lexauto

Building blocks for lexers: a regular-expression syntax tree, compilation
to a non-deterministic automaton, subset construction to a deterministic
one, right-context lookahead, longest-match simulation with backtracking,
and a runtime lexer state that tracks line, column and byte locations.

## Install

```
pip install lexauto
```

The only dependency is `wcwidth`, used to compute display columns.

## Modules

- `lexauto.range_map`: `Range` (an inclusive `start..end` range of code
  points with a value; `contains` accepts a character or a code point) and
  `RangeMap`, a sorted list of non-overlapping ranges. `insert` and
  `insert_ranges` split overlapping ranges and give the overlapping parts
  `merge(existing_value, new_value)`; `remove_ranges` cuts out every point
  covered by another sorted collection of ranges; `map` applies a function
  to every value; `RangeMap.from_sorted` builds a map from ranges that are
  already sorted and disjoint, raising `ValueError` otherwise.
- `lexauto.pattern`: the regex syntax tree. `Char`, `Str`, `CharSet`
  (single characters or `(start, end)` pairs), `ZeroOrMore`, `OneOrMore`,
  `ZeroOrOne`, `Concat`, `Or`, `Any` (`_`), `EndOfInput` (`$`), `Diff`
  (character-set difference, `#`) and `Var` (a reference to a named regex
  in a bindings mapping). Malformed characters and empty ranges raise
  `ValueError`.
- `lexauto.nfa`: `NFA`, whose states are integers with state 0 initial.
  `add_regex(bindings, regex, right_ctx, value)` adds a rule that accepts
  with `value`, optionally requiring right context number `right_ctx`.
  `add_re` and `regex_to_range_map` do the compilation. `CompileError` is
  raised for unbound variables and for regexes that cannot appear inside a
  `Diff` (strings, repetition, concatenation, `$`). `str(nfa)` prints the
  states and their transitions.
- `lexauto.dfa`: `DFA` and `nfa_to_dfa`. A DFA state keeps all the
  accepting values of its NFA states in rule order (`accepting`);
  `next_state` prefers character transitions over ranges and ranges over
  `_`; `end_of_input_state` follows the `$` transition.
- `lexauto.right_ctx`: `RightCtxDFAs`, one DFA per right context.
  `new_right_ctx(bindings, regex)` compiles a lookahead regex and returns
  its index; the object can be indexed, iterated and measured.
- `lexauto.semantic_action_table`: `SemanticActionTable`, which numbers
  actions in the order they are added and iterates `(index, action)`.
- `lexauto.simulate`: `simulate_nfa` and `simulate_dfa` split a string
  into `(matched_text, value)` pairs and return the position where
  matching got stuck, or `None`. `matches_right_ctx` checks a right
  context at a position.
- `lexauto.lexer`: `Loc` (line, column, UTF-8 byte index; tabs count four
  columns), `LexerErrorKind` (`INVALID_TOKEN`, `CUSTOM`), the exception
  `LexerError`, and `Lexer`, the runtime state a lexer loop drives:
  `next_char`, `peek`, `set_accepting_state`, `backtrack`,
  `reset_accepting_state`, `reset_match`, `match_text`, `match_loc`, and
  `Lexer.from_iter` for reading from any iterable of characters.

## Example

```python
from lexauto.nfa import NFA
from lexauto.dfa import nfa_to_dfa
from lexauto.pattern import Char, Concat, OneOrMore
from lexauto.simulate import simulate_dfa

nfa = NFA()
nfa.add_regex({}, Concat(OneOrMore(Char("a")), Char("b")), None, 1)
nfa.add_regex({}, Char("a"), None, 2)

dfa = nfa_to_dfa(nfa)
print(simulate_dfa(dfa, "aab"))   # ([('aab', 1)], None)
print(simulate_dfa(dfa, "aa"))    # ([('a', 2), ('a', 2)], None)
```

The longest match wins; among rules matching the same input, the rule
added first wins.

## What it does not do

There is no lexer-definition language and no generator: rules are built
as `lexauto.pattern` objects in Python, and turning a DFA plus `Lexer`
into a token stream with rule sets and semantic actions is left to the
caller. Named built-in character classes (such as alphabetic or
whitespace classes) are not provided; spell them out with `CharSet`.
There is no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```