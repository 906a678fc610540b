"""Tests for taskgen.lib.linekinds module."""

from taskgen.lib.linekinds import LineKind, classify_line, is_boundary


class TestEpicHeader:
    """Epic headers win over every other rule."""

    def test_epic_prefix_h3(self):
        assert classify_line("### Epic: Security Enhancement") == LineKind.EPIC_HEADER

    def test_epic_prefix_h2(self):
        assert classify_line("## Epic: Security Enhancement") == LineKind.EPIC_HEADER

    def test_epic_anywhere_on_h2_line(self):
        assert classify_line("## Platform Epic") == LineKind.EPIC_HEADER

    def test_single_hash_is_title_not_epic(self):
        assert classify_line("# Epic planning notes") == LineKind.TITLE_HEADER

    def test_epic_beats_features_marker(self):
        assert classify_line("## Epic Features: overview") == LineKind.EPIC_HEADER

    def test_leading_whitespace_ignored(self):
        assert classify_line("   ### Epic: Indented") == LineKind.EPIC_HEADER

    def test_h2_without_epic_is_other(self):
        assert classify_line("## Background") == LineKind.OTHER


class TestFeatureLines:
    def test_section_marker_header(self):
        assert classify_line("#### Features:") == LineKind.FEATURE_SECTION

    def test_section_marker_anywhere(self):
        assert classify_line("Key Features: fast and small") == LineKind.FEATURE_SECTION

    def test_bullet_containing_marker(self):
        assert classify_line("- Features: listed below") == LineKind.FEATURE_SECTION

    def test_numbered_bold_item(self):
        assert classify_line("1. **JWT Authentication**") == LineKind.FEATURE_ITEM

    def test_numbered_item_without_space(self):
        assert classify_line("12.**Search** with extras") == LineKind.FEATURE_ITEM

    def test_numbered_plain_item_is_other(self):
        assert classify_line("1. Plain step") == LineKind.OTHER


class TestPropertyAndBullet:
    def test_effort_property(self):
        assert classify_line("- **Effort**: 8 SP") == LineKind.PROPERTY

    def test_property_case_insensitive(self):
        assert classify_line("* **priority**: High") == LineKind.PROPERTY

    def test_business_value_property(self):
        assert classify_line("+ **Business Value**: High") == LineKind.PROPERTY

    def test_indented_property(self):
        assert classify_line("   - **Effort**: 5 SP") == LineKind.PROPERTY

    def test_property_without_colon_is_bullet(self):
        assert classify_line("- **Effort** 8") == LineKind.BULLET

    def test_other_bold_label_is_bullet(self):
        assert classify_line("- **Owner**: Dana") == LineKind.BULLET

    def test_bullet_markers(self):
        assert classify_line("- Fix bug") == LineKind.BULLET
        assert classify_line("* Fix bug") == LineKind.BULLET
        assert classify_line("+ Fix bug") == LineKind.BULLET

    def test_bold_prose_is_not_bullet(self):
        assert classify_line("**Note** this is prose") == LineKind.OTHER

    def test_horizontal_rule_is_not_bullet(self):
        assert classify_line("---") == LineKind.OTHER


class TestRemainingKinds:
    def test_title(self):
        assert classify_line("# Sample Tasks") == LineKind.TITLE_HEADER

    def test_blank(self):
        assert classify_line("") == LineKind.BLANK
        assert classify_line("   \t") == LineKind.BLANK

    def test_prose(self):
        assert classify_line("Just some text.") == LineKind.OTHER


class TestIsBoundary:
    def test_boundaries(self):
        assert is_boundary("## Epic: Next") is True
        assert is_boundary("#### Features:") is True
        assert is_boundary("2. **Next Feature**") is True

    def test_non_boundaries(self):
        assert is_boundary("- **Effort**: 3 SP") is False
        assert is_boundary("- task") is False
        assert is_boundary("") is False
        assert is_boundary("## Background") is False
