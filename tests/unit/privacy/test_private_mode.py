"""Tests for omnitrace/privacy/private_mode.py"""

from omnitrace.privacy.private_mode import MASK, mask_label, redact


class TestRedact:
    """Tests for display masking."""

    def test_masks_user_text(self):
        data = {"id": "e1", "title": "Therapy", "note": "private", "keywords": ["a", "b"], "duration": 5}

        assert redact(data) == {"id": "e1", "title": MASK, "note": MASK, "keywords": [MASK, MASK], "duration": 5}

    def test_system_labels_stay_visible(self):
        segments = [
            {"activity": "Active"},
            {"activity": "Idle"},
            {"activity": "Journal"},
            {"label": "Journal"},
            {"title": "Session recovered"},
        ]

        assert redact(segments) == [
            {"activity": "Active"},
            {"activity": "Idle"},
            {"activity": MASK},
            {"label": MASK},
            {"title": "Session recovered"},
        ]

    def test_nested_structures(self):
        data = {"success": True, "data": {"events": [{"title": "x", "context": {"state": {"query": "why?"}}}]}}

        assert redact(data) == {
            "success": True,
            "data": {"events": [{"title": MASK, "context": {"state": {"query": MASK}}}]},
        }

    def test_empty_and_missing_values_untouched(self):
        assert redact({"title": "", "note": None}) == {"title": "", "note": None}

    def test_input_not_modified(self):
        data = {"title": "Therapy"}

        redact(data)

        assert data == {"title": "Therapy"}

    def test_card_titles_and_score_labels_stay_visible(self):
        data = {
            "score": {"score": 82, "label": "Deep Focus"},
            "insights": [{"title": "Longest Focus Session", "value": "45 minutes"}],
        }

        assert redact(data) == data

    def test_mask_label(self):
        assert mask_label("Therapy") == MASK
        assert mask_label("Exploration Session") == "Exploration Session"

    def test_scalars(self):
        assert redact(5) == 5
        assert redact("Therapy") == "Therapy"
