"""Tests for LabelAllocator and label naming."""

from funcc.labels import LabelAllocator, label_name


class TestLabelAllocator:
    def test_starts_at_zero(self):
        assert LabelAllocator().next_label() == 0

    def test_strictly_increasing(self):
        labels = LabelAllocator()
        ids = [labels.next_label() for _ in range(5)]
        assert ids == [0, 1, 2, 3, 4]

    def test_issued_counts_calls(self):
        labels = LabelAllocator()
        labels.next_label()
        labels.next_label()
        assert labels.issued == 2

    def test_independent_allocators(self):
        a = LabelAllocator()
        b = LabelAllocator()
        a.next_label()
        assert b.next_label() == 0


class TestLabelName:
    def test_format(self):
        assert label_name(3, "ELSE") == "L3_ELSE"
        assert label_name(0, "BEGIN") == "L0_BEGIN"
