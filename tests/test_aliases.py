"""Tests for alias compilation and rewriting."""

import os

import pytest

from scanner.aliases import compile_aliases, rewrite_specifier
from scanner.errors import AliasPatternError, ConfigError


class TestCompileAliases:
    """Tests for alias rule compilation."""

    def test_no_aliases(self):
        """Test that missing aliases compile to an empty rule list."""
        assert compile_aliases(None, "/") == []
        assert compile_aliases({}, "/") == []

    def test_mapping_keeps_order(self):
        """Test that a mapping compiles in insertion order."""
        rules = compile_aliases({"@a": "/a", "@b": "/b"}, "/")

        assert [r.pattern for r in rules] == ["@a", "@b"]

    def test_rule_forms(self):
        """Test pairs and pattern/replacement dicts."""
        rules = compile_aliases(
            [("@a", "/a"), {"pattern": "@b", "replacement": "/b"}],
            "/",
        )

        assert [(r.pattern, r.replacement) for r in rules] == [("@a", "/a"), ("@b", "/b")]

    def test_relative_replacement_uses_cwd(self, tmp_path):
        """Test that relative replacements are made absolute against cwd."""
        rules = compile_aliases({"@app": "src/app"}, str(tmp_path))

        assert rules[0].replacement == os.path.join(str(tmp_path), "src", "app")

    def test_invalid_pattern(self):
        """Test that a malformed pattern raises a configuration error."""
        with pytest.raises(AliasPatternError):
            compile_aliases({"@app(": "/src"}, "/")

    def test_incomplete_rule(self):
        """Test that a dict rule without replacement is rejected."""
        with pytest.raises(ConfigError):
            compile_aliases([{"pattern": "@app"}], "/")


class TestRewriteSpecifier:
    """Tests for specifier rewriting."""

    def test_exact_match(self):
        """Test a specifier equal to the pattern."""
        rules = compile_aliases({"@app": "/src/app"}, "/")

        assert rewrite_specifier("@app", rules) == "/src/app"

    def test_prefix_match_keeps_rest(self):
        """Test that the remainder after the prefix is preserved."""
        rules = compile_aliases({"@app": "/src/app"}, "/")

        assert rewrite_specifier("@app/widgets/button", rules) == "/src/app/widgets/button"

    def test_prefix_must_end_at_segment(self):
        """Test that a longer first segment does not match."""
        rules = compile_aliases({"@app": "/src/app"}, "/")

        assert rewrite_specifier("@application/x", rules) == "@application/x"

    def test_first_rule_wins(self):
        """Test that only the first matching rule is applied."""
        rules = compile_aliases(
            [("@app/*", "/src/app"), ("@app/widgets", "/other")],
            "/",
        )

        assert rewrite_specifier("@app/widgets/x", rules) == "/src/app/widgets/x"

    def test_dollar_is_literal(self):
        """Test that '$' in a pattern matches a literal dollar sign."""
        rules = compile_aliases({"$lib": "/src/lib"}, "/")

        assert rewrite_specifier("$lib/util", rules) == "/src/lib/util"

    def test_no_match_passes_through(self):
        """Test that unmatched specifiers are unchanged."""
        rules = compile_aliases({"@app": "/src/app"}, "/")

        assert rewrite_specifier("./local", rules) == "./local"
        assert rewrite_specifier("lodash", rules) == "lodash"
