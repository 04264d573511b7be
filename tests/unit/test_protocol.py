"""Tests for protocol text helpers."""

import pytest

from rpsarena import protocol
from rpsarena.game.moves import Move


class TestAffirmative:
    """Tests for rematch answer parsing."""

    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES", "  yes please", "yeah", "\ty"])
    def test_yes_answers(self, answer: str) -> None:
        """Anything starting with y after trimming counts as yes."""
        assert protocol.is_affirmative(answer)

    @pytest.mark.parametrize("answer", ["", "n", "no", "nope y", "ok", "sure"])
    def test_other_answers(self, answer: str) -> None:
        """Everything else counts as no."""
        assert not protocol.is_affirmative(answer)


class TestMessages:
    """Tests for server message wording."""

    def test_round_messages_name_both_moves(self) -> None:
        """Round results show both moves."""
        assert protocol.round_tie(Move.ROCK, Move.ROCK) == "Tie! (ROCK vs ROCK)"
        assert (
            protocol.round_won("Alice", Move.PAPER, Move.ROCK)
            == "Alice wins this round! (PAPER beats ROCK)"
        )

    def test_score_line(self) -> None:
        """The score line lists both names and counts."""
        assert protocol.score_line("Alice", 2, 1, "Bob") == "Score: Alice 2 - 1 Bob"

    def test_messages_are_single_chunks(self) -> None:
        """Messages never carry their own trailing newline."""
        for text in (
            protocol.welcome(),
            protocol.pool_notice(),
            protocol.match_start("A", "B"),
            protocol.rematch_prompt(),
            protocol.closing_notice(),
        ):
            assert not text.endswith("\n")
