"""Session state machine for one pair of participants.

A Session owns its two connections from the moment the matchmaker pairs
them until it hands them back. It plays best-of-N matches, negotiates
rematches and, however it ends, returns live participants to the waiting
pool and closes dead ones.
"""

import logging
import secrets
from typing import TYPE_CHECKING

from rpsarena import protocol
from rpsarena.connection import Connection
from rpsarena.game.match import DEFAULT_WINS_NEEDED, MatchScore, SessionPhase
from rpsarena.game.moves import Move, RoundOutcome, parse_move, resolve_round

if TYPE_CHECKING:
    from rpsarena.lobby.pool import WaitingPool

logger = logging.getLogger(__name__)


class ParticipantDisconnected(Exception):
    """Raised inside a session when a participant's stream ends."""

    def __init__(self, participant: Connection) -> None:
        super().__init__(f"{participant.name} disconnected")
        self.participant = participant


def _generate_session_id() -> str:
    """Generate a short session ID for logs."""
    return secrets.token_urlsafe(6).upper()[:8]


class Session:
    """A running match between two participants.

    Attributes:
        id: Short identifier used in logs
        first: Participant drawn first from the pool
        second: Participant drawn second from the pool
        score: Score of the match in progress
        phase: Current lifecycle phase
        matches_played: Matches completed in this session
    """

    def __init__(
        self,
        first: Connection,
        second: Connection,
        pool: "WaitingPool",
        wins_needed: int = DEFAULT_WINS_NEEDED,
    ) -> None:
        """Create a session for two paired participants.

        Args:
            first: Participant drawn first from the pool
            second: Participant drawn second from the pool
            pool: Pool that receives the participants when the session ends
            wins_needed: Round wins required to take a match
        """
        self.id = _generate_session_id()
        self.first = first
        self.second = second
        self.score = MatchScore(wins_needed=wins_needed)
        self.phase = SessionPhase.ANNOUNCE
        self.matches_played = 0
        self._pool = pool
        self._returned: list[Connection] = []

    @property
    def participants(self) -> tuple[Connection, Connection]:
        return self.first, self.second

    async def run(self) -> None:
        """Play until the participants stop or one of them disconnects.

        Never raises: every way out of the session ends in the disposition
        step that hands both connections back.
        """
        # Anything typed before now is not an answer to us
        self.first.claim()
        self.second.claim()
        logger.info(f"New session {self.id}: {self.first.name} vs {self.second.name}")
        try:
            await self.broadcast(protocol.match_start(self.first.name, self.second.name))
            while True:
                await self.play_match()
                if not await self.negotiate_rematch():
                    break
        except ParticipantDisconnected as e:
            logger.info(f"Session {self.id} aborted: {e}")
            await self._notify_disconnect(e.participant)
        except Exception as e:
            logger.exception(f"Error in session {self.id}: {e}")
        finally:
            self.phase = SessionPhase.TERMINATED
            await self._dispose()
            logger.info(f"Session {self.id} ended after {self.matches_played} match(es)")

    async def broadcast(self, text: str) -> None:
        """Send the same text to both participants."""
        await self.first.send(text)
        await self.second.send(text)

    async def play_match(self) -> Connection:
        """Play one best-of-N match.

        Returns:
            The participant who won the match
        """
        while not self.score.is_decided:
            self.phase = SessionPhase.ROUND_IN_PROGRESS
            await self.play_round()

        self.phase = SessionPhase.MATCH_DECIDED
        self.matches_played += 1
        winner = self.first if self.score.winner is RoundOutcome.FIRST else self.second
        logger.info(
            f"Session {self.id}: {winner.name} won the match "
            f"{self.score.first}-{self.score.second}"
        )
        await self.broadcast(protocol.match_winner(winner.name))
        return winner

    async def play_round(self) -> RoundOutcome:
        """Collect one move from each participant and score the round."""
        await self.broadcast(protocol.round_header(self.score.round_number))

        # The first participant answers before the second is asked
        first_move = await self.ask_move(self.first)
        second_move = await self.ask_move(self.second)

        outcome = resolve_round(first_move, second_move)
        self.score.record(outcome)

        if outcome is RoundOutcome.TIE:
            await self.broadcast(protocol.round_tie(first_move, second_move))
        elif outcome is RoundOutcome.FIRST:
            await self.broadcast(protocol.round_won(self.first.name, first_move, second_move))
        else:
            await self.broadcast(protocol.round_won(self.second.name, second_move, first_move))

        await self.broadcast(
            protocol.score_line(
                self.first.name, self.score.first, self.score.second, self.second.name
            )
        )
        logger.debug(
            f"Session {self.id} round {self.score.rounds_played}: "
            f"{first_move.value} vs {second_move.value} -> {outcome.value}"
        )
        return outcome

    async def ask_move(self, participant: Connection) -> Move:
        """Prompt a participant until they answer with a valid move.

        Raises:
            ParticipantDisconnected: If the participant's stream ends
        """
        while True:
            reply = await participant.request(protocol.move_prompt(participant.name))
            if reply is None:
                raise ParticipantDisconnected(participant)
            move = parse_move(reply)
            if move is not None:
                return move
            await participant.send(protocol.invalid_move())

    async def ask_rematch(self, participant: Connection) -> bool:
        """Ask a participant whether they want to play again.

        Raises:
            ParticipantDisconnected: If the participant's stream ends
        """
        reply = await participant.request(protocol.rematch_prompt())
        if reply is None:
            raise ParticipantDisconnected(participant)
        return protocol.is_affirmative(reply)

    async def negotiate_rematch(self) -> bool:
        """Ask both participants, in order, about a rematch.

        Returns:
            True if both agreed and a new match should start
        """
        self.phase = SessionPhase.REMATCH_PROMPT
        first_wants = await self.ask_rematch(self.first)
        second_wants = await self.ask_rematch(self.second)

        if first_wants and second_wants:
            self.phase = SessionPhase.REMATCH_ANNOUNCE
            logger.info(f"Session {self.id}: rematch accepted")
            await self.broadcast(protocol.new_match())
            self.score.reset()
            self.phase = SessionPhase.ANNOUNCE
            return True

        if first_wants or second_wants:
            keen, decliner = (
                (self.first, self.second) if first_wants else (self.second, self.first)
            )
            logger.info(f"Session {self.id}: {decliner.name} declined the rematch")
            await decliner.send(protocol.farewell())
            await keen.send(protocol.opponent_declined(decliner.name))
            await self._return_to_pool(keen)
            return False

        logger.info(f"Session {self.id}: both players declined the rematch")
        await self.broadcast(protocol.closing_notice())
        return False

    async def _notify_disconnect(self, gone: Connection) -> None:
        for participant in self.participants:
            if participant is not gone:
                await participant.send(protocol.opponent_disconnected(gone.name))

    async def _return_to_pool(self, participant: Connection) -> None:
        self._returned.append(participant)
        await self._pool.enqueue(participant)

    async def _dispose(self) -> None:
        """Return live participants to the pool and close dead ones.

        A participant already sent back during rematch negotiation is skipped.
        """
        for participant in self.participants:
            if participant in self._returned:
                continue
            if participant.is_live:
                await self._return_to_pool(participant)
            else:
                participant.close()
