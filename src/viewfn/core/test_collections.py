import copy
import datetime
import random
from decimal import Decimal
from functools import partial

import pytest

from viewfn.core.collections import (
    SEQ_LIMIT,
    after,
    append,
    apply,
    complement,
    delimit,
    dictionary,
    first,
    in_,
    index,
    intersect,
    is_set,
    last,
    merge,
    querify,
    reverse,
    seq,
    shuffle,
    slice_,
    sort,
    union,
    uniq,
    where,
)
from viewfn.core.compare import compare, conditional, default, equal, ge, gt, le, lt, ne

NUMBERS = [1, 2, 3, 4, 5]


class Page:
    def __init__(self, title, weight):
        self.title = title
        self.weight = weight


def test_first_last_after():
    assert first(3, NUMBERS) == [1, 2, 3]
    assert last(3, NUMBERS) == [3, 4, 5]
    assert after(2, NUMBERS) == [4, 5]


def test_first_clamps_limit():
    assert first(10, [1, 2]) == [1, 2]
    assert first(-1, [1, 2]) == []
    assert last(0, [1, 2]) == []
    assert first("2", [1, 2, 3]) == [1, 2]


def test_first_over_mapping_uses_values():
    assert first(2, {"a": 1, "b": 2, "c": 3}) == [1, 2]


def test_unsupported_input_degrades():
    assert first(2, None) is None
    assert first(2, "abc") == []
    assert reverse(5) == []
    assert sort(None) is None


def test_first_plus_after_rebuilds_sequence():
    for k in range(len(NUMBERS) + 1):
        assert first(k, NUMBERS) + after(k - 1, NUMBERS) == NUMBERS


def test_after_out_of_range():
    assert after(-1, [1, 2]) == [1, 2]
    assert after(-2, [1, 2]) == []
    assert after(5, [1, 2]) == []
    assert after(1, [1, 2]) == []


def test_reverse_is_an_involution_and_copies():
    data = [1, "a", [2]]
    assert reverse(reverse(data)) == data
    assert reverse(data) == [[2], "a", 1]
    assert data == [1, "a", [2]]


def test_sort_by_text():
    assert sort(["b", "a", "c"]) == ["a", "b", "c"]


def test_sort_does_not_order_numbers_numerically():
    # text order: "10" < "2"
    assert sort([10, 2]) == [10, 2]
    assert sort([2, 10, 1]) == [1, 10, 2]


def test_sort_by_key_and_descending_is_stable():
    items = [
        {"n": "b", "i": 1},
        {"n": "a", "i": 2},
        {"n": "b", "i": 3},
    ]
    assert [x["i"] for x in sort(items, "n")] == [2, 1, 3]
    assert [x["i"] for x in sort(items, "n", "desc")] == [1, 3, 2]


def test_uniq():
    assert uniq([1, 2, 1, {"a": 1}, {"a": 1}]) == [1, 2, {"a": 1}]
    assert uniq([1, 1.0, True]) == [1, True]
    data = [3, 1, 3, 2, 1]
    assert uniq(uniq(data)) == uniq(data)


def test_union():
    assert union([1, 2, 3], [3, 4, 5]) == [1, 2, 3, 4, 5]
    data = [1, 2, 2, 3]
    assert union(data, data) == uniq(data)
    assert union([1], "x") == [1]
    assert union("x", [1]) == [1]
    assert union(None, None) is None


def test_intersect():
    assert intersect([1, 2, 3], [2, 3, 4]) == [2, 3]
    assert intersect([2, 2, 1], [1, 2]) == [2, 1]
    assert intersect([1], 5) == []
    assert intersect([1], None) is None


def test_intersect_is_symmetric_as_a_set():
    a, b = [5, 1, 3, 9, 1], [9, 3, 7, 5]
    assert set(intersect(a, b)) == set(intersect(b, a))


def test_complement():
    assert complement([1, 2], [2, 3, 4]) == [3, 4]
    assert complement([1], [2], [1, 2, 3, 3]) == [3, 3]
    assert complement([1]) == []


def test_merge_and_dictionary():
    assert merge({"a": 1, "b": 2}, {"b": 3}, "x") == {"a": 1, "b": 3}
    assert dictionary("a", 1, "b") == {"a": 1}
    assert dictionary(1, "x") == {"1": "x"}
    assert dictionary("a", 1, b=2) == {"a": 1, "b": 2}


def test_seq():
    assert seq(3) == [1, 2, 3]
    assert seq(2, 5) == [2, 3, 4, 5]
    assert seq(5, 1, -2) == [5, 3, 1]
    assert seq(1, 5, 2) == [1, 3, 5]
    assert seq(0) == []
    assert seq(1, 5, -1) == []


def test_seq_degrades():
    assert seq() == []
    assert seq(1, 5, 0) == []
    assert seq(1, 2, 3, 4) == []
    assert len(seq(SEQ_LIMIT)) == SEQ_LIMIT
    assert seq(SEQ_LIMIT + 1) == []


def test_shuffle_is_reproducible_with_explicit_rng():
    data = list(range(20))
    one = shuffle(data, random.Random(7))
    two = shuffle(data, random.Random(7))
    assert one == two
    assert sorted(one) == data
    assert data == list(range(20))


def test_index():
    data = {"a": {"b": [10, 20]}}
    assert index(data, "a", "b", 1) == 20
    assert index(data, ["a", "b", "1"]) == 20
    assert index(data, "a", "missing") is None
    assert index([1, 2], 5) is None
    assert index([1, 2], "x") is None
    assert index(data) is data


def test_is_set():
    assert is_set({"a": None}, "a")
    assert not is_set({"a": 1}, "b")
    assert is_set([1, 2], 1)
    assert not is_set([1, 2], 2)
    assert not is_set("ab", 0)


def test_in():
    assert in_([1, [2]], [2])
    assert not in_([1], "1")
    assert in_({"a": 1}, "a")
    assert in_("hello", "ell")
    assert not in_(5, 5)


def test_where():
    items = [{"k": 1}, {"k": 2}, {"k": 3}]
    assert where(items, "k", "gt", 1) == [{"k": 2}, {"k": 3}]
    assert where(items, "k", 2) == [{"k": 2}]
    assert where(items, "k", "!=", 2) == [{"k": 1}, {"k": 3}]
    assert where(items, "k", "bogus", 2) == []


def test_where_membership_operators():
    items = [{"tag": "a"}, {"tag": "b"}, {"tag": "c"}]
    assert where(items, "tag", "in", ["a", "c"]) == [{"tag": "a"}, {"tag": "c"}]
    assert where(items, "tag", "not in", ["a", "c"]) == [{"tag": "b"}]


def test_where_ordering_skips_missing_fields():
    items = [{"k": 1}, {}]
    assert where(items, "k", "lt", 5) == [{"k": 1}]
    assert where(items, "k", "ne", 1) == [{}]


def test_where_dotted_paths_and_attributes():
    items = [{"a": {"b": 1}}, {"a": {"b": 2}}]
    assert where(items, "a.b", 2) == [{"a": {"b": 2}}]

    pages = [Page("one", 10), Page("two", 20)]
    assert [p.title for p in where(pages, "weight", ">=", 15)] == ["two"]
    assert where([3, 1, 2], ".", "lt", 3) == [1, 2]


def test_apply():
    table = {"up": str.upper, "minus": lambda a, b: a - b}
    assert apply(table, ["a", "b"], "up") == ["A", "B"]
    assert apply(table, [5, 7], "minus", ".", 1) == [4, 6]
    assert apply(table, [5, 7], "minus", 10) == [5, 3]
    assert apply(table, ["a"], "missing") == []


def test_apply_refuses_itself():
    table = {}
    table["apply"] = partial(apply, table)
    assert apply(table, [[1]], "apply", "up") == []


def test_slice_and_append():
    assert slice_(1, "a", None) == [1, "a", None]
    assert append(None, 1, 2) == [1, 2]
    assert append([1], 2, 3) == [1, 2, 3]
    assert append("x", 1) == []


def test_delimit():
    assert delimit(["a", "b", "c"], ", ") == "a, b, c"
    assert delimit(["a", "b", "c"], ", ", " and ") == "a, b and c"
    assert delimit(["a"], ",", " and ") == "a"
    assert delimit([], ",") == ""
    assert delimit("x", ",") == "x"
    assert delimit({"k": 1, "j": 2}, "-") == "1-2"


def test_querify():
    assert querify("b", "2", "a", "x y") == "a=x+y&b=2"
    assert querify({"q": "a&b"}) == "q=a%26b"
    assert querify(["k", 1]) == "k=1"
    assert querify("dangling") == ""


def test_long_digit_text_degrades():
    digits = "1" * 5000
    assert first(digits, [1, 2]) == []
    assert last(digits, [1, 2]) == []
    assert after(digits, [1, 2]) == [2]
    assert seq("9" * 5000) == []
    assert index([1, 2], digits) is None
    assert not is_set([1, 2], digits)


def test_non_ascii_digits_are_not_positions():
    assert index(["a", "b"], "²") is None
    assert index(["a", "b"], "١") is None
    assert index(["a", "b"], "+-1") is None
    assert not is_set(["a", "b"], "²")
    assert where([["x", "y"]], "²", "x") == []
    assert index(["a", "b"], " 1 ") == "b"


def test_non_finite_positions_miss():
    assert index(["a"], float("nan")) is None
    assert index(["a"], Decimal("Infinity")) is None
    assert index(["a", "b"], Decimal("1")) == "b"


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def __eq__(self, other):
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)

    def __repr__(self):
        return f"Point({self.x!r}, {self.y!r})"


VALUES = [
    None,
    True,
    0,
    3,
    2.5,
    Decimal("1.5"),
    Decimal("NaN"),
    "",
    "text",
    "1" * 5000,
    "²",
    b"bytes",
    datetime.date(2024, 1, 1),
    Point(1, 2),
    [3, "a", {"k": 1}],
    {"k": 1, "n": [2]},
]


def _every_operation(value, items, mapping):
    return [
        lambda: first(value, items),
        lambda: first(2, value),
        lambda: last(value, items),
        lambda: last(2, value),
        lambda: after(value, items),
        lambda: after(0, value),
        lambda: reverse(value),
        lambda: sort(value),
        lambda: sort(items, value),
        lambda: sort(items, "k", value),
        lambda: shuffle(value, random.Random(0)),
        lambda: uniq(value),
        lambda: union(value, items),
        lambda: union(items, value),
        lambda: intersect(value, items),
        lambda: intersect(items, value),
        lambda: complement(value, items),
        lambda: complement(items, value),
        lambda: merge(value, mapping),
        lambda: merge(mapping, value),
        lambda: dictionary(value, value),
        lambda: dictionary("k", value),
        lambda: seq(value),
        lambda: seq(1, value),
        lambda: seq(1, 10, value),
        lambda: slice_(value),
        lambda: append(value, 1),
        lambda: append(items, value),
        lambda: index(value, 0),
        lambda: index(items, value),
        lambda: index(mapping, value),
        lambda: is_set(value, 0),
        lambda: is_set(items, value),
        lambda: is_set(mapping, value),
        lambda: in_(value, 1),
        lambda: in_(items, value),
        lambda: in_(mapping, value),
        lambda: where(value, "k", 1),
        lambda: where(items, value, 1),
        lambda: where(items, "k", value, 1),
        lambda: where(items, "k", "gt", value),
        lambda: apply(None, value, "upper"),
        lambda: delimit(value, ", "),
        lambda: delimit(items, value, value),
        lambda: querify(value),
        lambda: querify("k", value),
        lambda: equal(value, value),
        lambda: equal(value, items),
        lambda: equal(mapping, value),
        lambda: compare(value, 1),
        lambda: compare(1, value),
        lambda: compare(value, "a"),
        lambda: gt(value, 2),
        lambda: ge(value, 2),
        lambda: lt(value, 2),
        lambda: le(value, 2),
        lambda: ne(value, 2),
        lambda: conditional(value, 1, 2),
        lambda: default(1, value),
    ]


@pytest.mark.parametrize("value", VALUES, ids=lambda v: type(v).__name__)
def test_every_operation_accepts_every_kind(value):
    items = [3, "a", {"k": 1}]
    mapping = {"k": 1}
    before = [repr(value), repr(items), repr(mapping)]
    kept = copy.deepcopy(value)

    for operation in _every_operation(value, items, mapping):
        operation()

    assert [repr(value), repr(items), repr(mapping)] == before
    assert repr(kept) == before[0]
