"""Tests for the wrapper namespaces."""

import datetime
import math
import random

from viewfn.core.value import Outcome
from viewfn.funcs import (
    crypto,
    encoding,
    fmt,
    maths,
    paths,
    reflect,
    strings,
    timefmt,
    transform,
    urls,
)

UTC = datetime.timezone.utc


# =============================================================================
# crypto / encoding
# =============================================================================


def test_digests():
    assert crypto.md5("") == "d41d8cd98f00b204e9800998ecf8427e"
    assert crypto.sha1("abc") == "a9993e364706816aba3e25717850c26c9cd0d89d"
    assert (
        crypto.sha256("abc")
        == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_fnv32a():
    assert crypto.fnv32a("") == 0x811C9DC5
    assert crypto.fnv32a("a") == 0xE40C292C


def test_base64():
    assert encoding.base64_encode("hello") == "aGVsbG8="
    assert encoding.base64_decode("aGVsbG8=") == Outcome("hello")


def test_base64_decode_reports_failure():
    assert not encoding.base64_decode("!!!").ok
    assert not encoding.base64_decode("aGVsbG8").ok


def test_jsonify_sorts_keys():
    result = encoding.jsonify({"b": 1, "a": [1, "x", None]})
    assert result.ok
    assert result.value == '{"a":[1,"x",null],"b":1}'


def test_jsonify_unsupported_value_fails():
    result = encoding.jsonify(object())
    assert not result.ok
    assert result.error


# =============================================================================
# fmt
# =============================================================================


def test_print_spacing():
    assert fmt.print_("a", 1, 2, "b") == "a1 2b"
    assert fmt.println("a", 1) == "a 1\n"


def test_printf():
    assert fmt.printf("%05d", 42) == "00042"
    assert fmt.printf("%v-%v", "a", 1) == "a-1"
    assert fmt.printf("%d%%", 50) == "50%"
    assert fmt.printf("%.2f", "x") == "%.2f"


# =============================================================================
# math
# =============================================================================


def test_arithmetic():
    assert maths.add(1, "2", 3.5) == 6.5
    assert maths.sub(10, 3) == 7.0
    assert maths.mul(2, "3") == 6.0
    assert maths.div(10, 0, 2) == 5.0
    assert maths.abs_("-3") == 3.0
    assert maths.max_(1, "5", 3) == 5.0
    assert maths.min_() == 0.0


def test_mod_truncates():
    assert maths.mod(7, 3) == 1
    assert maths.mod(-7, 3) == -1
    assert maths.mod(7, 0) == 0


def test_rounding():
    assert maths.round_(2.5) == 3.0
    assert maths.round_(-2.5) == -3.0
    assert maths.round_(2.4) == 2.0
    assert maths.ceil("1.2") == 2.0
    assert maths.floor(-1.2) == -2.0


def test_sqrt_and_pow_edges():
    assert maths.sqrt(9) == 3.0
    assert math.isnan(maths.sqrt(-1))
    assert maths.pow_(2, 10) == 1024.0
    assert maths.pow_(10, 400) == math.inf
    assert maths.pow_(0, -1) == math.inf
    assert math.isnan(maths.pow_(-8, 0.5))


def test_rand_uses_given_generator():
    assert maths.rand(random.Random(1)) == random.Random(1).random()
    assert 0.0 <= maths.rand() < 1.0


# =============================================================================
# path / reflect
# =============================================================================


def test_clean():
    assert paths.clean("") == "."
    assert paths.clean("a//b/./c/..") == "a/b"
    assert paths.clean("//a") == "/a"
    assert paths.clean("../../x") == "../../x"
    assert paths.clean("/../x") == "/x"


def test_path_parts():
    assert paths.base("") == "."
    assert paths.base("/a/b/") == "b"
    assert paths.base("/") == "/"
    assert paths.dir_("/a/b/c.txt") == "/a/b"
    assert paths.dir_("file") == "."
    assert paths.split("a/b/c.txt") == ["a/b/", "c.txt"]


def test_extensions():
    assert paths.ext(".bashrc") == ".bashrc"
    assert paths.ext("a/b.tar.gz") == ".gz"
    assert paths.ext("a.b/c") == ""
    assert paths.base_name("/x/report.pdf") == "report"


def test_join():
    assert paths.join("a", "", "b/../c") == "a/c"
    assert paths.join() == ""


def test_reflect():
    assert reflect.is_map({})
    assert reflect.is_slice(())
    assert not reflect.is_map(None)
    assert not reflect.is_slice("abc")


# =============================================================================
# strings
# =============================================================================


def test_string_predicates_and_counts():
    assert strings.chomp("x\r\n\n") == "x"
    assert not strings.contains_any("hello", "xyz")
    assert not strings.contains_non_space(" \t")
    assert strings.count("cheese", "e") == 3
    assert strings.count_runes("a b c") == 3
    assert strings.count_words(" a  b ") == 2
    assert strings.rune_count("héllo") == 5


def test_find_re():
    assert strings.find_re(r"\d+", "a1b22c333") == ["1", "22", "333"]
    assert strings.find_re(r"\d+", "a1b22c333", 2) == ["1", "22"]
    assert strings.find_re("(", "x") == []


def test_replace_re_group_references():
    assert strings.replace_re(r"(\w+)@(\w+)", "$2 at ${1}", "me@host") == "host at me"
    assert strings.replace_re(r"(?P<n>\d)", "<$n>", "a1") == "a<1>"
    assert strings.replace_re("a", "$$", "abc") == "$bc"
    assert strings.replace_re("(a)", "$9", "abc") == "bc"


def test_replace_re_invalid_pattern_returns_input():
    assert strings.replace_re("(", "x", "abc") == "abc"


def test_replace_and_repeat():
    assert strings.replace("aaa", "a", "b") == "bbb"
    assert strings.replace("aaa", "a", "b", 2) == "bba"
    assert strings.repeat("ab", 3) == "ababab"
    assert strings.repeat("ab", -1) == ""


def test_substrings():
    assert strings.slice_string("hello", 1, 3) == "el"
    assert strings.slice_string("hello", 3, 1) == ""
    assert strings.substr("hello", -3) == "llo"
    assert strings.substr("hello", 1, 2) == "el"
    assert strings.substr("hello", 10) == ""


def test_split():
    assert strings.split("a,b", ",") == ["a", "b"]
    assert strings.split("abc", "") == ["a", "b", "c"]


def test_title_keeps_other_letters():
    assert strings.title("hello wORLD") == "Hello WORLD"
    assert strings.title("o'neil is_here") == "O'Neil Is_here"
    assert strings.first_upper("élan") == "Élan"


def test_trims():
    assert strings.trim("--x--", "-") == "x"
    assert strings.trim_left("--x--", "-") == "x--"
    assert strings.trim_right("--x--", "-") == "--x"
    assert strings.trim_prefix("prefix-x", "prefix-") == "x"
    assert strings.trim_suffix("x.txt", ".txt") == "x"
    assert strings.trim_space("  x \n") == "x"


def test_truncate():
    assert strings.truncate("short", 10) == "short"
    assert strings.truncate("Hello world foo", 12) == "Hello…"
    assert strings.truncate("abcdefghij", 5, "...") == "ab..."
    assert strings.truncate("abcdefghij", 5, default_suffix="~") == "abcd~"


# =============================================================================
# time
# =============================================================================


def test_as_time_layouts():
    assert timefmt.as_time("2024-03-09T18:30:00Z") == datetime.datetime(
        2024, 3, 9, 18, 30, tzinfo=UTC
    )
    precise = timefmt.as_time("2024-03-09T18:30:00.123456789+02:00")
    assert precise.microsecond == 123456
    assert precise.utcoffset() == datetime.timedelta(hours=2)
    assert timefmt.as_time("2024-03-09") == datetime.datetime(2024, 3, 9)
    assert timefmt.as_time("2024-03-09 07:08:09") == datetime.datetime(2024, 3, 9, 7, 8, 9)
    assert timefmt.as_time("03/09/2024") == datetime.datetime(2024, 3, 9)
    assert timefmt.as_time(datetime.date(2024, 3, 9)) == datetime.datetime(2024, 3, 9)


def test_as_time_unparsable_is_unset():
    assert timefmt.as_time("nope") is None
    assert timefmt.as_time(5) is None
    assert timefmt.as_time(None) is None


def test_format_reference_layouts():
    stamp = "2024-03-09T18:30:05Z"
    assert timefmt.format_("2006-01-02", stamp) == "2024-03-09"
    assert timefmt.format_("Jan 2, 2006 3:04PM", stamp) == "Mar 9, 2024 6:30PM"
    assert timefmt.format_("_2 Jan 06", datetime.date(2024, 3, 9)) == " 9 Mar 24"
    assert timefmt.format_("002", "2024-02-01") == "032"


def test_format_fraction_and_zone():
    tm = datetime.datetime(
        2024, 3, 9, 18, 30, 5, 120000, tzinfo=datetime.timezone(datetime.timedelta(hours=2))
    )
    assert timefmt.format_("Monday 15:04:05.000 -07:00", tm) == "Saturday 18:30:05.120 +02:00"
    assert timefmt.format_("05.999", tm) == "05.12"
    assert timefmt.format_("Z07:00", datetime.datetime(2024, 1, 1, tzinfo=UTC)) == "Z"


def test_format_non_time_is_empty():
    assert timefmt.format_("2006", "garbage") == ""


def test_now_is_aware():
    assert timefmt.now().tzinfo is not None


def test_parse_duration():
    assert timefmt.parse_duration("1h30m").value == datetime.timedelta(hours=1, minutes=30)
    assert timefmt.parse_duration("-1.5h").value == datetime.timedelta(hours=-1.5)
    assert timefmt.parse_duration("300ms").value == datetime.timedelta(milliseconds=300)
    assert timefmt.parse_duration("0").value == datetime.timedelta(0)


def test_parse_duration_failures():
    assert not timefmt.parse_duration("").ok
    assert not timefmt.parse_duration("5").ok
    result = timefmt.parse_duration("5x")
    assert not result.ok
    assert "unknown unit" in result.error


# =============================================================================
# transform / urls
# =============================================================================


def test_html_escape_matches_numeric_quote_entities():
    assert (
        transform.html_escape("<a href=\"x\">'&'</a>")
        == "&lt;a href=&#34;x&#34;&gt;&#39;&amp;&#39;&lt;/a&gt;"
    )
    assert transform.html_unescape("&lt;b&gt;&#39;") == "<b>'"


def test_markdownify_and_plainify():
    assert transform.markdownify("a\n\nb") == "<p>a</p><p>b</p>"
    assert transform.plainify("<b>bold</b> text") == "bold text"


def test_abs_and_rel_url():
    assert urls.abs_url("/about") == "http://localhost/about"
    assert urls.abs_url("about", base_url="https://example.com/") == "https://example.com/about"
    assert urls.abs_url("https://x.io/a") == "https://x.io/a"
    assert urls.rel_url("https://x.io/a/b?q=1") == "/a/b"
    assert urls.rel_url("docs") == "/docs"


def test_slugs():
    assert urls.anchorize("Hello, World!") == "hello-world"
    assert urls.urlize("  Foo Bar ") == "foo-bar"


def test_join_path_keeps_origin():
    assert urls.join_path("https://example.com", "a", "b/") == "https://example.com/a/b"
    assert urls.join_path("a", "b") == "a/b"


def test_parse_url():
    result = urls.parse("https://example.com:8080/p?q=1#f")
    assert result.ok
    assert result.value.hostname == "example.com"
    assert result.value.port == 8080
    assert result.value.fragment == "f"
    assert not urls.parse("http://[::1").ok
