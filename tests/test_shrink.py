from hypothesis import given
from hypothesis import strategies as st

from pbt.example import Person
from pbt.shrink import (CandidateTree, shrink_bool, shrink_char, shrink_filter, shrink_int,
                        shrink_int_between, shrink_list, shrink_map, shrink_nothing, shrink_optional,
                        shrink_record, shrink_str, shrink_towards, shrink_tuple, tree_bind,
                        tree_constant, tree_from_shrink, tree_map)


def test_shrink_int_halves_towards_zero():
    assert list(shrink_int(100)) == [0, 50, 75, 88, 94, 97, 99]
    assert list(shrink_int(1)) == [0]
    assert list(shrink_int(0)) == []


def test_shrink_int_negative_tries_positive_mirror():
    assert list(shrink_int(-5)) == [0, 5, -3, -4]


def test_shrink_towards_other_target():
    assert list(shrink_towards(18)(34)) == [18, 26, 30, 32, 33]
    assert list(shrink_towards(18)(18)) == []


def test_shrink_int_between_stays_in_range():
    assert list(shrink_int_between(5, 10)(10)) == [5, 8, 9]
    assert list(shrink_int_between(-10, -3)(-10)) == [-3, -7, -9]
    assert list(shrink_int_between(-3, 3)(-3)) == [0, 3, -2]


def _int_measure(value):
    return (abs(value), value < 0)


@given(st.integers())
def test_int_candidates_are_strictly_smaller(value):
    for candidate in shrink_int(value):
        assert _int_measure(candidate) < _int_measure(value)


@given(st.integers(-300, 300))
def test_slowest_int_shrink_chain_terminates(value):
    # always taking the last candidate is the longest way down
    steps = 0
    while True:
        candidates = list(shrink_int(value))
        if not candidates:
            break
        value = candidates[-1]
        steps += 1
        assert steps <= 700
    assert value == 0


def test_shrink_bool_and_char():
    assert list(shrink_bool(True)) == [False]
    assert list(shrink_bool(False)) == []
    assert list(shrink_char('c')) == ['a', 'b']
    assert list(shrink_char('a')) == []


def test_shrink_list_order():
    candidates = list(shrink_list(shrink_int)([1, 2, 3, 4]))
    assert candidates[:7] == [[], [3, 4], [1, 2], [2, 3, 4], [1, 3, 4], [1, 2, 4], [1, 2, 3]]
    assert candidates[7:10] == [[0, 2, 3, 4], [1, 0, 3, 4], [1, 1, 3, 4]]


def test_shrink_list_does_not_mutate_value():
    value = [5, 6]
    list(shrink_list(shrink_int)(value))
    assert value == [5, 6]


@given(st.lists(st.integers(-50, 50), max_size=12))
def test_list_candidates_are_shorter_or_change_one_element(value):
    for candidate in shrink_list(shrink_int)(value):
        if len(candidate) == len(value):
            changed = [i for i, (a, b) in enumerate(zip(value, candidate)) if a != b]
            assert len(changed) == 1
            i = changed[0]
            assert _int_measure(candidate[i]) < _int_measure(value[i])
        else:
            assert len(candidate) < len(value)


@given(st.lists(st.integers(-20, 20), max_size=6))
def test_greedy_list_shrinking_terminates(value):
    shrink = shrink_list(shrink_int)
    steps = 0
    while True:
        candidates = list(shrink(value))
        if not candidates:
            break
        value = candidates[-1]
        steps += 1
        assert steps <= 1000
    assert value == []


def test_shrink_str():
    candidates = list(shrink_str()("ba"))
    assert candidates[0] == ""
    assert "a" in candidates and "b" in candidates
    assert "aa" in candidates


def test_shrink_tuple_one_field_at_a_time():
    candidates = list(shrink_tuple(shrink_int, shrink_bool)((2, True)))
    assert candidates == [(0, True), (1, True), (2, False)]


def test_shrink_record_holds_siblings_fixed():
    shrink = shrink_record(name=shrink_str(), age=shrink_int)
    for candidate in shrink(Person("ab", 4)):
        assert candidate.name == "ab" or candidate.age == 4
    assert Person("ab", 0) in list(shrink(Person("ab", 4)))


def test_shrink_optional():
    assert list(shrink_optional(shrink_int)(3)) == [None, 0, 2]
    assert list(shrink_optional(shrink_int)(None)) == []


def test_shrink_filter_and_map():
    assert list(shrink_filter(lambda x: x % 2 == 0, shrink_int)(10)) == [0, 8]
    as_text = shrink_map(str, int, shrink_int)
    assert list(as_text("4")) == ["0", "2", "3"]
    assert list(shrink_nothing(123)) == []


def test_candidates_that_make_user_code_raise_are_skipped():
    assert list(shrink_filter(lambda x: 100 // x > 0, shrink_int)(4)) == [2, 3]
    assert list(shrink_map(lambda x: 12 // x, lambda y: y, shrink_int)(4)) == [6, 4]
    assert list(shrink_map(str, int, shrink_int)("not a number")) == []
    ages = list(shrink_record(age=lambda age: [-1, age - 1])(Person("ab", 4)))
    assert ages == [Person("ab", 3)]


def _last_candidate_chain(shrink, value, max_steps):
    # always taking the last candidate is the longest way down
    steps = 0
    while True:
        candidates = list(shrink(value))
        if not candidates:
            return value
        value = candidates[-1]
        steps += 1
        assert steps <= max_steps


@given(st.text(alphabet="abcxyzABC019 ", max_size=5))
def test_greedy_str_shrinking_terminates(value):
    assert _last_candidate_chain(shrink_str(), value, 1000) == ""


@given(st.integers(-100, 100), st.booleans())
def test_greedy_tuple_shrinking_terminates(number, flag):
    shrink = shrink_tuple(shrink_int, shrink_bool)
    assert _last_candidate_chain(shrink, (number, flag), 500) == (0, False)


@given(st.text(alphabet="abcxyz", max_size=4), st.integers(0, 100))
def test_greedy_record_shrinking_terminates(name, age):
    shrink = shrink_record(name=shrink_str(), age=shrink_int)
    assert _last_candidate_chain(shrink, Person(name, age), 1000) == Person("", 0)


@given(st.none() | st.integers(-100, 100))
def test_greedy_optional_shrinking_terminates(value):
    assert _last_candidate_chain(shrink_optional(shrink_int), value, 500) is None


def test_candidate_tree_is_restartable_and_lazy():
    produced = []
    def counting(value):
        for candidate in shrink_int(value):
            produced.append(candidate)
            yield candidate

    tree = tree_from_shrink(8, counting)
    assert produced == []
    first = [c.value for c in tree.candidates]
    second = [c.value for c in tree.candidates]
    assert first == second == [0, 4, 6, 7]
    # computed once, and the candidates of the candidates not at all
    assert produced == [0, 4, 6, 7]


def test_tree_constant_has_no_candidates():
    assert list(tree_constant(1).candidates) == []


def test_tree_map():
    tree = tree_map(str, tree_from_shrink(2, shrink_int))
    assert tree.value == "2"
    assert [c.value for c in tree.candidates] == ["0", "1"]


def test_tree_bind_shrinks_outer_value_first():
    outer = tree_from_shrink(2, shrink_int)
    tree = tree_bind(lambda x: tree_map(lambda y: (x, y), tree_from_shrink(1, shrink_int)), outer)
    assert tree.value == (2, 1)
    assert [c.value for c in tree.candidates] == [(0, 1), (1, 1), (2, 0)]


def test_candidate_tree_direct_construction():
    tree = CandidateTree(3, iter([tree_constant(1)]))
    assert [c.value for c in tree.candidates] == [1]
    assert [c.value for c in tree.candidates] == [1]
