"""Tests for scalar/per-card option values and broadcasting."""

import pytest

from cardsmith.models.failure import ArityMismatchError
from cardsmith.models.option_value import PerCard, Scalar, classify, expand, is_per_card


class TestClassify:
    def test_lists_and_tuples_are_per_card(self) -> None:
        assert classify([1, 2]) == PerCard((1, 2))
        assert classify((1, 2)) == PerCard((1, 2))

    def test_everything_else_is_scalar(self) -> None:
        """Strings and mappings are single values, not sequences."""
        assert classify("abc") == Scalar("abc")
        assert classify(None) == Scalar(None)
        assert classify({"a": 1}) == Scalar({"a": 1})

    def test_already_classified(self) -> None:
        value = PerCard((1,))
        assert classify(value) is value

    def test_is_per_card(self) -> None:
        assert is_per_card([])
        assert not is_per_card("ab")


class TestExpand:
    """Tests for broadcasting to deck size."""

    @pytest.mark.parametrize("deck_size", [0, 1, 3, 10])
    def test_scalar_broadcasts(self, deck_size: int) -> None:
        """A scalar fills every slot."""
        assert expand("x", 10, deck_size) == (10,) * deck_size

    def test_sequence_element_wise(self) -> None:
        assert expand("x", [0, 100, 200], 3) == (0, 100, 200)

    @pytest.mark.parametrize(("values", "deck_size"), [([0, 100], 3), ([1, 2, 3, 4], 3), ([], 1)])
    def test_arity_mismatch(self, values: list[int], deck_size: int) -> None:
        """Sequences are never padded or truncated."""
        with pytest.raises(ArityMismatchError) as exc_info:
            expand("x", values, deck_size)

        assert exc_info.value.key == "x"
        assert exc_info.value.expected == deck_size
        assert exc_info.value.actual == len(values)

    def test_arity_message_names_key_and_counts(self) -> None:
        with pytest.raises(ArityMismatchError) as exc_info:
            expand("x", [0, 100], 3)

        message = str(exc_info.value)
        assert "'x'" in message
        assert "2" in message
        assert "3" in message

    def test_converter_gets_index(self) -> None:
        """The converter is called with each element and its card index."""
        result = expand("x", ["a", "b"], 2, lambda value, index: f"{value}{index}")
        assert result == ("a0", "b1")

    def test_converter_on_broadcast(self) -> None:
        result = expand("x", 5, 3, lambda value, index: value + index)
        assert result == (5, 6, 7)

    def test_input_untouched(self) -> None:
        values = [1, 2]
        expand("x", values, 2, lambda value, index: value * 10)
        assert values == [1, 2]
