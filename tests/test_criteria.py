"""Tests for ExpectationCriteria, the decorator and the YAML loaders."""

import json

import pytest
from pydantic import ValidationError

from raisecheck import (
    ExpectationCriteria,
    MessageMatch,
    expected_exception,
    get_expectation,
    load_criteria,
    load_criteria_file,
    load_criteria_from_dict,
    load_criteria_from_yaml_string,
    qualified_name,
)


class TestQualifiedName:
    def test_builtin_is_bare(self):
        assert qualified_name(ValueError) == "ValueError"

    def test_module_exception(self):
        assert qualified_name(json.JSONDecodeError) == "json.decoder.JSONDecodeError"

    def test_nested_class(self):
        class Outer:
            class Inner(Exception):
                pass

        assert qualified_name(Outer.Inner).endswith("<locals>.Outer.Inner")


class TestExpectationCriteria:
    """Tests for criteria construction and validation."""

    def test_defaults(self):
        criteria = ExpectationCriteria()

        assert criteria.expected_type_name is None
        assert criteria.expected_message is None
        assert criteria.match_type is MessageMatch.EXACT
        assert criteria.user_message is None
        assert criteria.handler is None
        assert criteria.expected_type_label == "An Exception"

    def test_type_converted_to_name(self):
        criteria = ExpectationCriteria(expected_type_name=json.JSONDecodeError)

        assert criteria.expected_type_name == "json.decoder.JSONDecodeError"

    def test_aliases(self):
        criteria = ExpectationCriteria(raises="KeyError", message="missing", match="contains")

        assert criteria.expected_type_name == "KeyError"
        assert criteria.expected_message == "missing"
        assert criteria.match_type is MessageMatch.CONTAINS

    def test_non_exception_type_rejected(self):
        with pytest.raises(ValidationError, match="not an exception type"):
            ExpectationCriteria(raises=int)

    def test_blank_type_name_means_any(self):
        assert ExpectationCriteria(raises="  ").expected_type_name is None

    def test_invalid_regex_rejected(self):
        with pytest.raises(ValidationError, match="Invalid regular expression"):
            ExpectationCriteria(message="(unclosed", match=MessageMatch.REGEX)

    def test_invalid_regex_allowed_for_other_strategies(self):
        criteria = ExpectationCriteria(message="(unclosed", match=MessageMatch.CONTAINS)

        assert criteria.expected_message == "(unclosed"

    def test_invalid_handler_name_rejected(self):
        with pytest.raises(ValidationError, match="not a valid identifier"):
            ExpectationCriteria(handler="not a name")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ExpectationCriteria(raises="KeyError", comment="extra")

    def test_frozen(self):
        criteria = ExpectationCriteria(raises="KeyError")

        with pytest.raises(ValidationError):
            criteria.expected_type_name = "ValueError"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("exact", MessageMatch.EXACT),
            ("Exact", MessageMatch.EXACT),
            ("Contains", MessageMatch.CONTAINS),
            ("REGEX", MessageMatch.REGEX),
            ("StartsWith", MessageMatch.STARTS_WITH),
            ("starts-with", MessageMatch.STARTS_WITH),
            ("startswith", MessageMatch.STARTS_WITH),
            (None, MessageMatch.EXACT),
        ],
    )
    def test_match_type_spellings(self, raw, expected):
        assert ExpectationCriteria(match=raw).match_type is expected

    def test_unknown_match_type_rejected(self):
        with pytest.raises(ValidationError):
            ExpectationCriteria(match="fuzzy")

    def test_labels(self):
        assert MessageMatch.EXACT.label == "Expected: "
        assert MessageMatch.CONTAINS.label == "Expected message containing: "
        assert MessageMatch.REGEX.label == "Expected message matching: "
        assert MessageMatch.STARTS_WITH.label == "Expected message starting: "


class TestDecorator:
    """Tests for @expected_exception."""

    def test_attaches_criteria(self):
        @expected_exception(KeyError, message="k", match="starts_with", handler="check")
        def test_lookup():
            pass

        criteria = get_expectation(test_lookup)

        assert criteria == ExpectationCriteria(
            raises="KeyError", message="k", match=MessageMatch.STARTS_WITH, handler="check"
        )

    def test_bare_decorator_accepts_any_exception(self):
        @expected_exception
        def test_anything():
            pass

        assert get_expectation(test_anything) == ExpectationCriteria()

    def test_readable_through_bound_method(self):
        class Fixture:
            @expected_exception("ValueError")
            def test_method(self):
                pass

        assert get_expectation(Fixture().test_method).expected_type_name == "ValueError"

    def test_undecorated(self):
        assert get_expectation(lambda: None) is None

    def test_invalid_arguments_fail_at_decoration(self):
        with pytest.raises(ValidationError):
            expected_exception(ValueError, message="[", match="regex")


class TestLoaders:
    """Tests for loading criteria from structured data."""

    def test_from_yaml_string(self, expectations_yaml):
        expectations = load_criteria_from_yaml_string(expectations_yaml)

        assert list(expectations) == ["test_parse", "test_lookup", "test_anything", "test_pattern"]
        assert expectations["test_parse"].match_type is MessageMatch.CONTAINS
        assert expectations["test_parse"].user_message == "parser should reject garbage"
        assert expectations["test_lookup"].handler == "check_key"
        assert expectations["test_anything"] == ExpectationCriteria()
        assert expectations["test_pattern"].match_type is MessageMatch.REGEX

    def test_from_dict(self):
        expectations = load_criteria_from_dict({"test_x": {"raises": "OSError"}})

        assert expectations["test_x"].expected_type_name == "OSError"

    def test_from_file(self, tmp_path, expectations_yaml):
        path = tmp_path / "expectations.yml"
        path.write_text(expectations_yaml)

        assert load_criteria_file(path) == load_criteria(str(path)) == load_criteria(path)

    def test_empty_document(self):
        assert load_criteria_from_yaml_string("") == {}

    def test_dispatch_yaml_string(self, expectations_yaml):
        assert load_criteria(expectations_yaml) == load_criteria_from_yaml_string(
            expectations_yaml
        )

    def test_invalid_entry(self):
        with pytest.raises(ValidationError):
            load_criteria_from_dict({"test_x": {"raises": "OSError", "note": "nope"}})

    def test_invalid_source_type(self):
        with pytest.raises(TypeError, match="source must be"):
            load_criteria(42)

    def test_existing_path_with_colon_is_a_file(self, tmp_path, expectations_yaml):
        path = tmp_path / "specs:v1.yml"
        path.write_text(expectations_yaml)

        assert load_criteria(str(path)) == load_criteria_file(path)
