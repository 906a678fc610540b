"""Tests for taskgen.lib.fieldmap module."""

import logging

from taskgen.lib.fieldmap import (
    FIELD_BUSINESS_VALUE,
    FIELD_DESCRIPTION,
    FIELD_ORIGINAL_ESTIMATE,
    FIELD_PRIORITY,
    FIELD_STORY_POINTS,
    FIELD_TAGS,
    FIELD_TITLE,
    FieldMap,
    build_description,
    build_fields,
    load_field_map,
    map_business_value,
    map_work_item_type,
)
from taskgen.lib.models import Priority, WorkItemKind, new_node


class TestLoadFieldMap:
    def test_none_dir_returns_defaults(self):
        fm = load_field_map(None)
        assert fm.work_item_types["UserStory"] == "User Story"
        assert fm.priorities["Critical"] == 1

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_field_map(tmp_path) == FieldMap()

    def test_overrides_merge_over_defaults(self, tmp_path):
        (tmp_path / "fields.yaml").write_text(
            "work_item_types:\n"
            "  UserStory: Product Backlog Item\n"
            "priorities:\n"
            "  High: 2\n"
            "business_values:\n"
            "  High: 200\n"
        )
        fm = load_field_map(tmp_path)
        assert fm.work_item_types["UserStory"] == "Product Backlog Item"
        assert fm.work_item_types["Epic"] == "Epic"
        assert fm.priorities["High"] == 2
        assert fm.priorities["Low"] == 3
        assert fm.business_values["high"] == 200
        assert fm.business_values["low"] == 10

    def test_empty_file(self, tmp_path):
        (tmp_path / "fields.yaml").write_text("")
        assert load_field_map(tmp_path) == FieldMap()

    def test_invalid_yaml_falls_back(self, tmp_path, caplog):
        (tmp_path / "fields.yaml").write_text("priorities: [unclosed")
        with caplog.at_level(logging.WARNING):
            fm = load_field_map(tmp_path)
        assert fm == FieldMap()
        assert "Failed to parse" in caplog.text

    def test_non_numeric_priority_falls_back(self, tmp_path):
        (tmp_path / "fields.yaml").write_text("priorities:\n  High: urgent\n")
        assert load_field_map(tmp_path) == FieldMap()

    def test_defaults_are_not_shared(self):
        first = FieldMap()
        first.priorities["High"] = 9
        assert FieldMap().priorities["High"] == 1


class TestMapping:
    def test_work_item_types(self):
        fm = FieldMap()
        assert map_work_item_type(WorkItemKind.USER_STORY, fm) == "User Story"
        assert map_work_item_type(WorkItemKind.EPIC, fm) == "Epic"

    def test_unknown_type_falls_back_to_task(self):
        fm = FieldMap(work_item_types={})
        assert map_work_item_type(WorkItemKind.BUG, fm) == "Task"

    def test_business_value_number(self):
        assert map_business_value("40", FieldMap()) == 40

    def test_business_value_signed_number(self):
        assert map_business_value("-5", FieldMap()) == -5

    def test_business_value_non_ascii_digit(self):
        assert map_business_value("²", FieldMap()) is None
        node = new_node(WorkItemKind.EPIC, "E", business_value="²")
        assert FIELD_BUSINESS_VALUE not in build_fields(node, FieldMap())

    def test_business_value_band(self):
        assert map_business_value("High - Security is important", FieldMap()) == 100
        assert map_business_value("  medium", FieldMap()) == 50

    def test_business_value_unknown(self):
        assert map_business_value("Huge", FieldMap()) is None
        assert map_business_value("", FieldMap()) is None
        assert map_business_value("- dash first", FieldMap()) is None


class TestBuildFields:
    def test_minimal_fields(self):
        node = new_node(WorkItemKind.EPIC, "Platform")
        fields = build_fields(node, FieldMap())
        assert fields == {
            FIELD_TITLE: "Platform",
            FIELD_DESCRIPTION: "",
            FIELD_PRIORITY: "2",
        }

    def test_story_points_on_feature(self):
        node = new_node(WorkItemKind.FEATURE, "F", story_points=8, priority=Priority.CRITICAL)
        fields = build_fields(node, FieldMap())
        assert fields[FIELD_STORY_POINTS] == "8"
        assert fields[FIELD_PRIORITY] == "1"
        assert FIELD_ORIGINAL_ESTIMATE not in fields

    def test_task_effort_is_original_estimate(self):
        node = new_node(WorkItemKind.TASK, "T", story_points=3)
        fields = build_fields(node, FieldMap())
        assert fields[FIELD_ORIGINAL_ESTIMATE] == "3"
        assert FIELD_STORY_POINTS not in fields

    def test_epic_effort_not_sent(self):
        node = new_node(WorkItemKind.EPIC, "E", story_points=21)
        fields = build_fields(node, FieldMap())
        assert FIELD_STORY_POINTS not in fields
        assert FIELD_ORIGINAL_ESTIMATE not in fields

    def test_business_value_and_tags(self):
        node = new_node(
            WorkItemKind.EPIC, "E", business_value="Low impact", tags=["security", "q3"]
        )
        fields = build_fields(node, FieldMap())
        assert fields[FIELD_BUSINESS_VALUE] == "10"
        assert fields[FIELD_TAGS] == "security; q3"

    def test_description_with_acceptance_criteria(self):
        node = new_node(
            WorkItemKind.USER_STORY,
            "S",
            description="Log in with SSO",
            acceptance_criteria=["Redirects to IdP", "Creates session"],
        )
        assert build_description(node) == (
            "Log in with SSO<br/><br/><strong>Acceptance Criteria:</strong><br/>"
            "1. Redirects to IdP<br/>2. Creates session"
        )

    def test_criteria_without_description(self):
        node = new_node(WorkItemKind.USER_STORY, "S", acceptance_criteria=["Works"])
        assert build_description(node) == "<strong>Acceptance Criteria:</strong><br/>1. Works"
