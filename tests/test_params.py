"""Tests for parameter string parsing."""

import pytest

from protoc_gen_txt.errors import ParameterError
from protoc_gen_txt.params import Params, parse_parameters, split_fields, unquote


class TestParseParameters:
    """Tests for parse_parameters."""

    def test_pairs_keys_and_quoted_values(self):
        params = parse_parameters('a=1,2;b;c="x;y"')

        assert params == {"a": ["1", "2"], "b": [""], "c": ["x;y"]}

    def test_empty_string(self):
        assert parse_parameters("") == {}
        assert parse_parameters(None) == {}

    def test_empty_pairs_are_skipped(self):
        assert parse_parameters("a=1;;b=2;") == {"a": ["1"], "b": ["2"]}

    def test_key_with_empty_value(self):
        assert parse_parameters("flag=") == {"flag": [""]}

    def test_repeated_key_accumulates_in_order(self):
        params = parse_parameters("template=a.tmpl;template=b.tmpl,c.tmpl")

        assert params["template"] == ["a.tmpl", "b.tmpl", "c.tmpl"]

    def test_equals_also_separates_values(self):
        assert parse_parameters("k=a=b") == {"k": ["a", "b"]}

    def test_quoted_value_keeps_separators(self):
        params = parse_parameters('left="<<";sep="a,b=c"')

        assert params["left"] == ["<<"]
        assert params["sep"] == ["a,b=c"]

    def test_escaped_quote_inside_quotes(self):
        params = parse_parameters('c="a\\"b"')

        assert params["c"] == ['a"b']

    def test_unterminated_quote_raises(self):
        with pytest.raises(ParameterError, match="unterminated"):
            parse_parameters('c="x;y')

    def test_malformed_quoted_value_raises(self):
        with pytest.raises(ParameterError):
            parse_parameters('c="x"y"')

    @pytest.mark.parametrize(
        "text",
        ['c="a" "b"', 'c="\\N{BULLET}"', 'c="\\q"', 'c="\\\'"', 'c="\\777"'],
    )
    def test_non_go_literals_are_malformed(self, text):
        with pytest.raises(ParameterError, match="malformed"):
            parse_parameters(text)

    def test_go_escapes(self):
        params = parse_parameters('c="\\x41\\u00e9\\101\\n"')

        assert params["c"] == ["AéA\n"]

    def test_returns_params_instance(self):
        assert isinstance(parse_parameters("a=1"), Params)


class TestSplitFields:
    """Tests for the quote-aware splitter."""

    def test_splits_on_any_separator(self):
        assert split_fields("a,b=c", ",", "=") == ["a", "b", "c"]

    def test_drops_empty_fields(self):
        assert split_fields(",,a,,", ",") == ["a"]

    def test_backslash_outside_quotes_is_literal(self):
        assert split_fields("a\\,b", ",") == ["a\\", "b"]


class TestUnquote:
    """Tests for unquote."""

    def test_escape_sequences(self):
        assert unquote('"tab\\there"') == "tab\there"

    def test_requires_closing_quote(self):
        with pytest.raises(ParameterError):
            unquote('"abc')


class TestParamsAccessors:
    """Tests for the typed accessors."""

    def test_get_int(self):
        params = Params({"n": ["42"], "bad": ["x"], "empty": []})

        assert params.get_int("n") == 42
        assert params.get_int("bad", 7) == 7
        assert params.get_int("empty", 3) == 3
        assert params.get_int("missing") == 0

    @pytest.mark.parametrize(
        "value,expected",
        [("yes", True), ("true", True), ("TRUE", True), ("no", False), ("1", False)],
    )
    def test_get_bool(self, value, expected):
        assert Params({"flag": [value]}).get_bool("flag") is expected

    def test_get_bool_default(self):
        assert Params().get_bool("flag") is False
        assert Params().get_bool("flag", True) is True

    def test_get_str(self):
        params = Params({"name": ["first", "second"]})

        assert params.get_str("name") == "first"
        assert params.get_str("missing") == ""
