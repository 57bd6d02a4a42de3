"""
Tests for exclude-regex translation — PCRE delimiters and modifiers.
"""

import re

import pytest

from opcache_preload.core.patterns import compile_exclude_regex, translate_pcre


class TestTranslatePcre:
    def test_bare_pattern_unchanged(self):
        assert translate_pcre(r"Test\.php$") == r"Test\.php$"

    def test_slash_delimiters_stripped(self):
        assert translate_pcre(r"/Test\.php$/") == r"Test\.php$"

    def test_modifiers_become_inline_flags(self):
        assert translate_pcre("#vendor/.*#is") == "(?is)vendor/.*"

    def test_unicode_modifier_dropped(self):
        assert translate_pcre("~cache~u") == "cache"

    def test_unsupported_modifier(self):
        with pytest.raises(ValueError, match="U"):
            translate_pcre("/a.*b/U")

    def test_bracket_pattern_not_treated_as_delimited(self):
        assert translate_pcre("[abc]") == "[abc]"

    def test_mismatched_delimiters_unchanged(self):
        assert translate_pcre("/tmp#") == "/tmp#"

    def test_empty_body_unchanged(self):
        assert translate_pcre("//") == "//"


class TestCompileExcludeRegex:
    def test_case_insensitive_match(self):
        pattern = compile_exclude_regex(r"/[A-Za-z0-9_]test\.php$/i")
        assert pattern.search("/app/tests/ControllerTest.php")
        assert not pattern.search("/app/src/Controller.php")

    def test_invalid_pattern(self):
        with pytest.raises(re.error):
            compile_exclude_regex("([unclosed")
