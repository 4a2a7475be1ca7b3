"""Tests for form data and rule bookkeeping."""

from __future__ import annotations

from validly.forms import FormManager, RuleManager, normalize_messages
from validly.registry import RuleRegistry


class TestFormManager:
    def test_data_is_per_scope(self):
        forms = FormManager()
        forms.set_form_data({"email": "a@b.co"})
        forms.set_field_value("zip", "01001-000", scope="billing")
        assert forms.get_all_form_data() == {"email": "a@b.co"}
        assert forms.get_field_value("zip", "billing") == "01001-000"
        assert forms.get_field_value("zip") is None
        assert forms.scopes() == ["default", "billing"]

    def test_set_form_data_merges(self):
        forms = FormManager()
        forms.set_form_data({"a": 1})
        forms.set_form_data({"b": 2})
        assert forms.get_all_form_data() == {"a": 1, "b": 2}

    def test_copies_are_detached(self):
        forms = FormManager()
        forms.set_form_data({"a": 1})
        forms.get_all_form_data()["a"] = 2
        assert forms.get_field_value("a") == 1

    def test_field_states(self):
        forms = FormManager()
        forms.set_field_state("email", {"touched": True})
        forms.set_field_state("email", {"dirty": True})
        assert forms.get_field_state("email") == {"touched": True, "dirty": True}
        assert forms.get_field_states() == {"email": {"touched": True, "dirty": True}}

    def test_reset_and_clear(self):
        forms = FormManager()
        forms.set_form_data({"a": 1})
        forms.set_form_data({"b": 2}, scope="other")
        forms.reset_form()
        assert forms.get_all_form_data() == {}
        assert "default" in forms.scopes()
        forms.clear_form_data("other")
        assert "other" not in forms.scopes()
        forms.clear_form_data("all")
        assert forms.scopes() == []


class TestNormalizeMessages:
    def test_nested(self):
        assert normalize_messages({"email": {"required": "Need it"}}, ["email"]) == {
            "email": {"required": "Need it"}
        }

    def test_dotted(self):
        assert normalize_messages({"email.required": "Need it"}, ["email"]) == {
            "email": {"required": "Need it"}
        }

    def test_rule_wide_applies_to_every_field(self):
        grouped = normalize_messages({"required": "Fill {field}"}, ["a", "b"])
        assert grouped == {"a": {"required": "Fill {field}"}, "b": {"required": "Fill {field}"}}

    def test_field_specific_beats_rule_wide(self):
        grouped = normalize_messages(
            {"a.required": "Specific", "required": "Generic"}, ["a", "b"]
        )
        assert grouped["a"]["required"] == "Specific"
        assert grouped["b"]["required"] == "Generic"


class TestRuleManager:
    def test_set_and_get_rules(self):
        manager = RuleManager(RuleRegistry())
        parsed = manager.set_field_rules("email", "required|email")
        assert [rule.name for rule in parsed] == ["required", "email"]
        assert manager.has_field_rules("email")
        assert manager.get_fields_with_rules() == ["email"]

    def test_rules_replace_previous(self):
        manager = RuleManager(RuleRegistry())
        manager.set_field_rules("email", "required|email")
        manager.set_field_rules("email", "email")
        assert [rule.name for rule in manager.get_field_rules("email")] == ["email"]

    def test_multiple_with_messages(self):
        manager = RuleManager(RuleRegistry())
        manager.set_multiple_field_rules(
            {"email": "required", "name": "required"},
            messages={"email.required": "Email please", "required": "Fill {field}"},
        )
        assert manager.get_field_messages("email") == {"required": "Email please"}
        assert manager.get_field_messages("name") == {"required": "Fill {field}"}

    def test_scopes_and_labels(self):
        manager = RuleManager(RuleRegistry())
        manager.set_field_rules("zip", "required", scope="billing")
        manager.set_field_label("zip", "CEP", scope="billing")
        assert manager.get_fields_with_rules() == []
        assert manager.get_field_label("zip", "billing") == "CEP"
        manager.clear_rules("billing")
        assert manager.scopes() == []

    def test_remove_field_rules(self):
        manager = RuleManager(RuleRegistry())
        manager.set_field_rules("email", "required", messages={"required": "x"})
        manager.remove_field_rules("email")
        assert not manager.has_field_rules("email")
        assert manager.get_field_messages("email") == {}

    def test_numeric_sibling_bound(self):
        manager = RuleManager(RuleRegistry())
        rules = manager.set_field_rules("age", "numeric|min:18")
        assert rules[1].validate("21", "age", {}) is True
