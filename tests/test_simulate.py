import pytest

from lexauto.dfa import nfa_to_dfa
from lexauto.nfa import NFA
from lexauto.pattern import (
    Any,
    Char,
    CharSet,
    Concat,
    EndOfInput,
    OneOrMore,
    Or,
    Str,
    Var,
    ZeroOrMore,
    ZeroOrOne,
)
from lexauto.right_ctx import RightCtxDFAs
from lexauto.simulate import matches_right_ctx, simulate_dfa, simulate_nfa


def check(nfa, cases, ctxs=None):
    dfa = nfa_to_dfa(nfa)
    for text, expected_matches, expected_error in cases:
        expected = (expected_matches, expected_error)
        assert simulate_nfa(nfa, text, ctxs) == expected, f"NFA failed for {text!r}"
        assert simulate_dfa(dfa, text, ctxs) == expected, f"DFA failed for {text!r}"


def single(regex):
    nfa = NFA()
    nfa.add_regex(None, regex, None, 1)
    return nfa


def test_simulate_backtracking():
    nfa = NFA()
    nfa.add_regex(None, Concat(OneOrMore(Char("a")), Char("b")), None, 1)
    nfa.add_regex(None, Char("a"), None, 2)
    check(
        nfa,
        [
            ("a", [("a", 2)], None),
            ("aa", [("a", 2), ("a", 2)], None),
            ("aab", [("aab", 1)], None),
        ],
    )


def test_issue_16():
    nfa = NFA()
    nfa.add_regex(None, Str("xyzxyz"), None, 1)
    nfa.add_regex(None, Str("xyz"), None, 2)
    nfa.add_regex(None, Str("xya"), None, 3)
    check(
        nfa,
        [
            ("xyzxya", [("xyz", 2), ("xya", 3)], None),
            ("xyzxyz", [("xyzxyz", 1)], None),
        ],
    )


def test_stuck_1():
    check(NFA(), [("a", [], 0)])


def test_stuck_2():
    check(single(Str("ab")), [("aba", [("ab", 1)], 2)])


def test_stuck_3():
    nfa = NFA()
    nfa.add_regex(None, Str("aaab"), None, 1)
    nfa.add_regex(None, Str("a"), None, 2)
    check(nfa, [("aaabb", [("aaab", 1)], 4)])


def test_simulate_char():
    check(single(Char("a")), [("aa", [("a", 1), ("a", 1)], None), ("b", [], 0)])


def test_simulate_string():
    check(
        single(Str("ab")),
        [("a", [], 0), ("ab", [("ab", 1)], None), ("abc", [("ab", 1)], 2)],
    )


def test_simulate_char_set_char():
    check(
        single(CharSet(["a", "b"])),
        [
            ("a", [("a", 1)], None),
            ("b", [("b", 1)], None),
            ("ab", [("a", 1), ("b", 1)], None),
            ("ba", [("b", 1), ("a", 1)], None),
        ],
    )


def test_simulate_char_set_range():
    check(
        single(CharSet(["a", "b", ("0", "9")])),
        [("ab09", [("a", 1), ("b", 1), ("0", 1), ("9", 1)], None)],
    )


def test_simulate_zero_or_more():
    check(
        single(ZeroOrMore(Char("a"))),
        [
            ("a", [("a", 1)], None),
            ("aa", [("aa", 1)], None),
            ("aab", [("aa", 1)], 2),
        ],
    )


def test_simulate_one_or_more():
    check(
        single(OneOrMore(Char("a"))),
        [
            ("", [], 0),
            ("a", [("a", 1)], None),
            ("aa", [("aa", 1)], None),
            ("aab", [("aa", 1)], 2),
        ],
    )


def test_simulate_zero_or_one():
    check(
        single(ZeroOrOne(Char("a"))),
        [
            ("", [], 0),
            ("a", [("a", 1)], None),
            ("aa", [("a", 1), ("a", 1)], None),
            ("aab", [("a", 1), ("a", 1)], 2),
        ],
    )


def test_simulate_concat():
    check(
        single(Concat(Char("a"), Char("b"))),
        [("a", [], 0), ("ab", [("ab", 1)], None), ("aba", [("ab", 1)], 2)],
    )


def test_simulate_or():
    check(
        single(Or(Char("a"), Char("b"))),
        [
            ("a", [("a", 1)], None),
            ("b", [("b", 1)], None),
            ("ab", [("a", 1), ("b", 1)], None),
        ],
    )


def test_simulate_or_one_or_more_char():
    check(
        single(Or(OneOrMore(Char("a")), Char("b"))),
        [
            ("a", [("a", 1)], None),
            ("b", [("b", 1)], None),
            ("aa", [("aa", 1)], None),
        ],
    )


def test_simulate_multiple_accepting_states_1():
    nfa = NFA()
    nfa.add_regex(None, Str("aaaa"), None, 1)
    nfa.add_regex(None, Str("aaab"), None, 2)
    check(
        nfa,
        [
            ("aaaa", [("aaaa", 1)], None),
            ("aaab", [("aaab", 2)], None),
            ("aaac", [], 0),
        ],
    )


def test_multiple_accepting_states_2():
    nfa = NFA()
    nfa.add_regex(None, Or(OneOrMore(Char("a")), Char("b")), None, 1)
    nfa.add_regex(None, CharSet([("0", "9")]), None, 2)
    check(
        nfa,
        [
            ("b", [("b", 1)], None),
            ("a", [("a", 1)], None),
            ("aa", [("aa", 1)], None),
            ("0", [("0", 2)], None),
        ],
    )


def test_simulate_variables():
    bindings = {
        "initial": CharSet([("a", "z")]),
        "subsequent": CharSet([("a", "z"), ("A", "Z"), ("0", "9"), "-", "_"]),
    }
    nfa = NFA()
    nfa.add_regex(
        bindings, Concat(Var("initial"), ZeroOrMore(Var("subsequent"))), None, 1
    )
    check(
        nfa,
        [
            ("a", [("a", 1)], None),
            ("aA", [("aA", 1)], None),
            ("aA123-a", [("aA123-a", 1)], None),
        ],
    )


def test_zero_or_more_concat_confusion_1():
    check(
        single(Concat(ZeroOrMore(Char("a")), Char("a"))),
        [("a", [("a", 1)], None), ("aa", [("aa", 1)], None)],
    )


def test_zero_or_more_concat_confusion_2():
    check(
        single(Concat(ZeroOrMore(Char("a")), Str("ab"))),
        [("ab", [("ab", 1)], None), ("aab", [("aab", 1)], None)],
    )


def test_zero_or_more_concat_confusion_3():
    check(
        single(Concat(Concat(Char("a"), ZeroOrMore(Char("a"))), Char("a"))),
        [("a", [], 0), ("aa", [("aa", 1)], None), ("aaa", [("aaa", 1)], None)],
    )


def test_simulate_any_1():
    nfa = NFA()
    nfa.add_regex(None, Str("ab"), None, 1)
    nfa.add_regex(None, Any(), None, 2)
    check(
        nfa,
        [
            ("a", [("a", 2)], None),
            ("ab", [("ab", 1)], None),
            ("abc", [("ab", 1), ("c", 2)], None),
        ],
    )


def test_simulate_any_2():
    check(
        single(Concat(Char("'"), Concat(Any(), Char("'")))),
        [("'a'", [("'a'", 1)], None)],
    )


def test_simulate_end_of_input_1():
    regex = Concat(
        Str("//"), Concat(ZeroOrMore(Any()), Or(Char("\n"), EndOfInput()))
    )
    check(
        single(regex),
        [
            ("//", [("//", 1)], None),
            ("//  \n", [("//  \n", 1)], None),
            ("//  ", [("//  ", 1)], None),
        ],
    )


def test_simulate_end_of_input_2():
    nfa = NFA()
    nfa.add_regex(None, EndOfInput(), None, 1)
    nfa.add_regex(None, ZeroOrMore(Any()), None, 2)
    check(nfa, [("a", [("a", 2)], None)])


def test_simulate_multiple_accepting_states_3():
    nfa = NFA()
    nfa.add_regex(None, Str("aaa"), None, 1)
    nfa.add_regex(None, Str("aaa"), None, 2)
    nfa.add_regex(None, Str("aa"), None, 3)
    check(nfa, [("aaa", [("aaa", 1)], None), ("aa", [("aa", 3)], None)])


def test_range_and_char_confusion():
    nfa = NFA()
    nfa.add_regex(None, Str("ab"), None, 1)
    nfa.add_regex(None, OneOrMore(CharSet([("a", "z")])), None, 2)
    check(nfa, [("ab", [("ab", 1)], None), ("ac", [("ac", 2)], None)])


def test_overlapping_ranges():
    nfa = NFA()
    nfa.add_regex(None, Concat(CharSet([("a", "b")]), Char("1")), None, 1)
    nfa.add_regex(None, Concat(CharSet([("a", "c")]), Char("2")), None, 2)
    check(nfa, [("a1", [("a1", 1)], None), ("a2", [("a2", 2)], None)])


def test_right_context_1():
    nfa = NFA()
    ctxs = RightCtxDFAs()
    ctx = ctxs.new_right_ctx(None, Char("a"))
    nfa.add_regex(None, Char("a"), ctx, 1)
    check(nfa, [("aa", [("a", 1)], 1)], ctxs)
    check(nfa, [("ab", [], 0)], ctxs)


def test_right_context_2():
    nfa = NFA()
    ctxs = RightCtxDFAs()
    ctx = ctxs.new_right_ctx(None, Any())
    nfa.add_regex(None, Char("a"), ctx, 1)
    check(nfa, [("aa", [("a", 1)], 1)], ctxs)
    check(nfa, [("ab", [("a", 1)], 1)], ctxs)
    check(nfa, [("a", [], 0)], ctxs)


def test_right_context_3():
    nfa = NFA()
    ctxs = RightCtxDFAs()
    ctx = ctxs.new_right_ctx(None, EndOfInput())
    nfa.add_regex(None, Char("a"), ctx, 1)
    check(nfa, [("a", [("a", 1)], None)], ctxs)
    check(nfa, [("ab", [], 0)], ctxs)


def test_right_context_4():
    nfa = NFA()
    ctxs = RightCtxDFAs()
    ctx = ctxs.new_right_ctx(None, Char("a"))
    nfa.add_regex(None, Char("a"), ctx, 1)
    ctx = ctxs.new_right_ctx(None, EndOfInput())
    nfa.add_regex(None, Char("a"), ctx, 2)
    check(nfa, [("aa", [("a", 1), ("a", 2)], None)], ctxs)


def test_positions_count_characters_not_bytes():
    check(single(Any()), [("京a", [("京", 1), ("a", 1)], None)])
    check(single(Char("a")), [("a京", [("a", 1)], 1)])


@pytest.mark.parametrize(
    "text, pos, expected",
    [("xa", 1, True), ("xb", 1, False), ("x", 1, False), ("aa", 0, True)],
)
def test_matches_right_ctx_char(text, pos, expected):
    ctxs = RightCtxDFAs()
    idx = ctxs.new_right_ctx(None, Char("a"))
    assert matches_right_ctx(ctxs[idx], text, pos) is expected


@pytest.mark.parametrize(
    "text, pos, expected",
    [("x", 1, True), ("xy", 1, False), ("", 0, True)],
)
def test_matches_right_ctx_end_of_input(text, pos, expected):
    ctxs = RightCtxDFAs()
    idx = ctxs.new_right_ctx(None, EndOfInput())
    assert matches_right_ctx(ctxs[idx], text, pos) is expected


def test_matches_right_ctx_newline_or_end():
    ctxs = RightCtxDFAs()
    idx = ctxs.new_right_ctx(None, Or(Char("\n"), EndOfInput()))
    dfa = ctxs[idx]
    assert matches_right_ctx(dfa, "ab\n", 2) is True
    assert matches_right_ctx(dfa, "ab", 2) is True
    assert matches_right_ctx(dfa, "abc", 2) is False


def test_simulate_without_right_ctx_argument():
    nfa = single(Str("ab"))
    assert simulate_nfa(nfa, "abab") == ([("ab", 1), ("ab", 1)], None)
    assert simulate_dfa(nfa_to_dfa(nfa), "abab") == ([("ab", 1), ("ab", 1)], None)