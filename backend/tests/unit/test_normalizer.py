"""Tests for chat input normalization."""

import pytest

from fanjobo.wizards.normalizer import (
    CANCEL,
    CONFIRM,
    NEXT_PAGE,
    PREVIOUS_PAGE,
    PROFILE_COMMAND,
    SAVE_GOALS,
    SKIP,
    START,
    UNIVERSITY_EXAM_TIPS,
    UNIVERSITY_NOTES,
    display_label,
    is_skip,
    mark_selected,
    normalize,
    strip_selection_mark,
)


class TestNormalize:
    """Tests for normalize function."""

    def test_trims_whitespace(self):
        """Surrounding whitespace is removed."""
        assert normalize("  hello world \n") == "hello world"

    def test_none_is_empty(self):
        """None becomes the empty string."""
        assert normalize(None) == ""

    def test_unknown_text_passes_through(self):
        """Free text keeps its casing."""
        assert normalize("Signals and Systems") == "Signals and Systems"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("cancel", CANCEL),
            ("/cancel", CANCEL),
            ("لغو", CANCEL),
            ("skip", SKIP),
            ("ندارم", SKIP),
            ("-", SKIP),
            ("ثبت نهایی", CONFIRM),
            ("/start", START),
            ("/profile", PROFILE_COMMAND),
            ("ثبت اهداف", SAVE_GOALS),
            ("نکات امتحان دانشگاه", UNIVERSITY_EXAM_TIPS),
            ("university notes", UNIVERSITY_NOTES),
        ],
    )
    def test_maps_aliases_to_tokens(self, raw, expected):
        """Slash commands, localized words and case variants map to tokens."""
        assert normalize(raw) == expected

    def test_maps_navigation_labels(self):
        """Decorated navigation buttons map back to their tokens."""
        assert normalize(display_label(NEXT_PAGE)) == NEXT_PAGE
        assert normalize(display_label(PREVIOUS_PAGE)) == PREVIOUS_PAGE
        assert normalize("بعدی ➡️") == NEXT_PAGE

    def test_strips_selection_mark(self):
        """A selected option reads back as the plain option."""
        assert normalize(mark_selected("Internship")) == "Internship"

    def test_is_idempotent(self):
        """Normalizing twice gives the same result."""
        for raw in ["✅ Job", "  Next ➡️ ", "لغو", "plain"]:
            once = normalize(raw)
            assert normalize(once) == once


class TestHelpers:
    """Tests for the small normalizer helpers."""

    def test_strip_selection_mark_variants(self):
        """All checkmark glyphs are stripped, only once."""
        assert strip_selection_mark("☑️ web") == "web"
        assert strip_selection_mark("✔ web") == "web"
        assert strip_selection_mark("✅ ✅ web") == "✅ web"

    def test_display_label_defaults_to_token(self):
        """Tokens without decoration are shown as-is."""
        assert display_label(CANCEL) == CANCEL

    def test_is_skip(self):
        """Skip keywords are recognized, other text is not."""
        assert is_skip("Skip") is True
        assert is_skip("رد") is True
        assert is_skip("Skipper") is False
