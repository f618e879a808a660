"""Tests for placeholder resolution (kmpgen.scaffolder.resolver)."""

from __future__ import annotations

import itertools

import pytest

from kmpgen.scaffolder.resolver import find_variables, missing_variables, resolve


pytestmark = pytest.mark.unit


class TestResolve:
    def test_both_syntaxes(self):
        assert resolve("${a}/{{b}}", {"a": "x", "b": "y"}) == "x/y"

    def test_every_occurrence(self):
        assert resolve("${m}-${m}-{{m}}", {"m": "pay"}) == "pay-pay-pay"

    def test_unknown_placeholders_untouched(self):
        assert resolve("${known}/${unknown}/{{other}}", {"known": "k"}) == "k/${unknown}/{{other}}"

    def test_unused_keys_ignored(self):
        assert resolve("plain text", {"a": "1"}) == "plain text"

    def test_empty_variables(self):
        assert resolve("${a}", {}) == "${a}"

    def test_values_inserted_verbatim(self):
        assert resolve("${v}", {"v": "<&\"'>\\n"}) == "<&\"'>\\n"

    def test_no_recursive_substitution(self):
        result = resolve("${a}", {"a": "${b}", "b": "deep"})
        assert result == "${b}"

    def test_key_order_does_not_matter(self):
        text = "${a}/${ab}/{{abc}}/${b}"
        values = {"a": "1", "ab": "2", "abc": "3", "b": "${a}"}
        results = {
            resolve(text, dict(order))
            for order in itertools.permutations(values.items())
        }
        assert results == {"1/2/3/${a}"}

    def test_idempotent_for_plain_values(self):
        values = {"moduleName": "payments", "packageName": "com.example"}
        once = resolve("${moduleName}/{{packageName}}", values)
        assert resolve(once, values) == once

    def test_not_idempotent_when_value_looks_like_placeholder(self):
        values = {"a": "${b}", "b": "x"}
        once = resolve("${a}", values)
        twice = resolve(once, values)
        assert once == "${b}"
        assert twice == "x"
        assert once != twice

    def test_incomplete_syntax_left_alone(self):
        assert resolve("${a} ${ {{a} $a", {"a": "x"}) == "x ${ {{a} $a"


class TestFindVariables:
    def test_mixed(self):
        assert find_variables("${a}/{{b}}/literal") == {"a", "b"}

    def test_repeated_names_once(self):
        assert find_variables("${a}${a}{{a}}") == {"a"}

    def test_none(self):
        assert find_variables("no placeholders here") == set()


class TestMissingVariables:
    def test_missing_sorted(self):
        assert missing_variables("${z}/${a}/{{m}}", {"m": "1"}) == ["a", "z"]

    def test_all_supplied(self):
        assert missing_variables("${a}", {"a": ""}) == []
