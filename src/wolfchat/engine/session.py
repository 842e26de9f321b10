"""GameSession - the single authority over one room's game.

Phase cycle:
    WAITING -> NIGHT -> DAY -> VOTE -> NIGHT -> ...
    any playing phase -> ENDED once a win condition holds
    ENDED -> WAITING on reset

Every operation returns a CommandResult. Rejections are told privately to the
actor and leave state untouched. Night and vote resolution can be reached two
ways (everyone acted, or the deadline passed); both go through
resolve_night()/resolve_vote(), which run at most once per epoch.
"""

import logging
import random
from typing import Optional

from wolfchat.broadcast import Broadcaster, everyone
from wolfchat.config import GameSettings
from wolfchat.engine.errors import CommandResult
from wolfchat.engine.game_state import GameState
from wolfchat.engine.night_engine import NightResolutionEngine
from wolfchat.engine.role_assigner import RoleAssigner
from wolfchat.engine.scheduler import Clock, PhaseScheduler
from wolfchat.engine.victory import WinEvaluator
from wolfchat.engine.vote_tally import VoteTally
from wolfchat.events.game_events import (
    DeathCause,
    ErrorCode,
    NightVerb,
    Phase,
    VictoryOutcome,
)
from wolfchat.events.messages import (
    ActionConfirm,
    ErrorMessage,
    FinalPlayer,
    GameEnd,
    GameEventMessage,
    GameStateMessage,
    NightActionRequest,
    OutboundMessage,
    PhaseChange,
    PhaseTimer,
    PlayerView,
    SeerResultMessage,
    YourRole,
)
from wolfchat.models.player import Faction, Role
from wolfchat.models.roles import get_definition

logger = logging.getLogger(__name__)


def _join_names(names: list[str]) -> str:
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + " and " + names[-1]


class GameSession:
    """Aggregate holding all mutable game state for one room."""

    def __init__(
        self,
        broadcaster: Broadcaster,
        settings: Optional[GameSettings] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the session in the WAITING phase.

        Args:
            broadcaster: Substrate used for every outbound message.
            settings: Phase durations, seat bounds and role roster.
            clock: Time source for deadlines. Defaults to time.monotonic.
            rng: Random source for dealing roles. Seed it for reproducible deals.
        """
        self._broadcaster = broadcaster
        self._settings = settings or GameSettings()
        self._scheduler = PhaseScheduler(clock)
        self._assigner = RoleAssigner(
            rng=rng,
            min_players=self._settings.min_players,
            max_players=self._settings.max_players,
            role_counts=self._settings.role_counts,
        )
        self._night = NightResolutionEngine()
        self._tally = VoteTally()
        self._evaluator = WinEvaluator()
        self._state = GameState()

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def scheduler(self) -> PhaseScheduler:
        return self._scheduler

    @property
    def settings(self) -> GameSettings:
        return self._settings

    # ======================================================================
    # Seats
    # ======================================================================

    def join(self, identity: str, name: Optional[str] = None) -> CommandResult:
        state = self._state
        if state.phase != Phase.WAITING:
            return self._reject(identity, CommandResult.reject(ErrorCode.GAME_ALREADY_RUNNING))
        if identity in state.players:
            return self._reject(identity, CommandResult.reject(ErrorCode.ALREADY_SEATED))
        if len(state.players) >= self._settings.max_players:
            return self._reject(identity, CommandResult.reject(ErrorCode.SEATS_FULL))

        if not name:
            name = self._broadcaster.roster_snapshot().get(identity, identity)
        player = state.seat(identity, self._unique_name(name))
        logger.info("Player seated | identity=%s name=%s seats=%d", identity, player.name, len(state.players))

        self._confirm(identity)
        self._announce(
            f"{player.name} took a seat ({len(state.players)}/{self._settings.max_players})."
        )
        if state.host == identity:
            self._announce(f"{player.name} is the host.")
        self._broadcast_state()
        return CommandResult.accept()

    def leave(self, identity: str) -> CommandResult:
        """Free a seat. Mid-game, the game continues without the player."""
        state = self._state
        old_host = state.host
        player = state.unseat(identity)
        if player is None:
            return self._reject(
                identity, CommandResult.reject(ErrorCode.NOT_YOUR_TURN, "You are not seated.")
            )
        logger.info("Player left | identity=%s name=%s phase=%s", identity, player.name, state.phase.value)

        self._announce(f"{player.name} left the game.")
        if state.host is not None and state.host != old_host:
            self._announce(f"{state.display_name(state.host)} is now the host.")

        if state.is_playing and not self._check_victory():
            self._recheck_completion()
        self._broadcast_state()
        return CommandResult.accept()

    def _unique_name(self, name: str) -> str:
        taken = {p.name.casefold() for p in self._state.players.values()}
        candidate, suffix = name, 2
        while candidate.casefold() in taken:
            candidate = f"{name}#{suffix}"
            suffix += 1
        return candidate

    # ======================================================================
    # Game lifecycle
    # ======================================================================

    def start(self, actor: str) -> CommandResult:
        """Deal roles and enter the first night. Host only."""
        state = self._state
        if state.phase != Phase.WAITING:
            return self._reject(actor, CommandResult.reject(ErrorCode.GAME_ALREADY_RUNNING))
        if actor != state.host:
            return self._reject(actor, CommandResult.reject(ErrorCode.NOT_HOST))
        seat_check = self._assigner.check_seat_count(len(state.players))
        if not seat_check:
            return self._reject(actor, seat_check)

        self._assigner.deal(state)
        state.day = 1
        state.winner = None
        state.votes = {}
        state.pending_hunter = None
        state.night.reset_for_new_night()
        logger.debug(
            "Game started | players=%d roles=%s",
            len(state.players),
            {p.name: p.role.value for p in state.players.values()},
        )

        peers = self._assigner.werewolf_peers(state)
        for player in state.players.values():
            definition = get_definition(player.role)
            self._send(
                player.identity,
                YourRole(
                    role=player.role,
                    description=definition.description,
                    teammates=peers.get(player.identity, []),
                ),
            )

        self._announce(f"The game begins with {len(state.players)} players. Night falls...")
        self._enter_night()
        return CommandResult.accept()

    def reset(self, actor: Optional[str] = None) -> CommandResult:
        """Return an ended room to WAITING with empty seats.

        Args:
            actor: Requesting identity (host only), or None for a system reset.
        """
        state = self._state
        if actor is not None:
            if state.phase != Phase.ENDED:
                return self._reject(actor, CommandResult.reject(ErrorCode.INVALID_PHASE))
            if state.host is not None and actor != state.host:
                return self._reject(actor, CommandResult.reject(ErrorCode.NOT_HOST))

        self._state = GameState()
        self._scheduler.enter_phase()
        logger.info("Room reset | actor=%s", actor)
        self._broadcast(PhaseChange(phase=Phase.WAITING, day_count=1))
        self._announce("The room is open. Use /join to take a seat.")
        self._broadcast_state()
        return CommandResult.accept()

    # ======================================================================
    # Night
    # ======================================================================

    def night_action(self, actor: str, verb: NightVerb | str, target: Optional[str] = None) -> CommandResult:
        """Submit a night verb (kill, check, save, poison, skip)."""
        state = self._state
        try:
            verb = NightVerb(verb)
        except ValueError:
            return self._reject(actor, CommandResult.reject(ErrorCode.NOT_YOUR_TURN))

        target_id = self._resolve_target(target)
        previous_kill = state.night.kill_target
        result = self._night.submit(state, actor, verb, target_id)
        if not result:
            return self._reject(actor, result)

        logger.info(
            "Night action | day=%d actor=%s verb=%s target=%s",
            state.day, actor, verb.value, target_id,
        )
        self._confirm(actor)

        if verb == NightVerb.CHECK:
            self._send(
                actor,
                SeerResultMessage(
                    target_name=state.display_name(target_id),
                    is_werewolf=state.is_werewolf(target_id),
                ),
            )
        elif verb == NightVerb.KILL:
            self._broadcast_to_pack(
                f"{state.display_name(actor)} chose {state.display_name(target_id)} as tonight's victim."
            )
            if state.night.kill_target != previous_kill:
                self._offer_save_to_witch()

        self._broadcast_state()
        self._recheck_completion()
        return CommandResult.accept()

    def resolve_night(self, epoch: int) -> bool:
        """Apply the night's outcome. Runs at most once per epoch.

        Returns:
            True if this call performed the resolution.
        """
        state = self._state
        if state.phase != Phase.NIGHT or not self._scheduler.owns(epoch) or state.resolved_epoch == epoch:
            logger.debug("Ignoring stale night resolution | epoch=%d current=%d", epoch, self._scheduler.epoch)
            return False
        state.resolved_epoch = epoch

        outcome = self._night.resolve(state)
        died: list[str] = []
        for identity, cause in outcome.deaths.items():
            if not state.kill(identity):
                logger.warning("Night death skipped, player missing | identity=%s", identity)
                continue
            logger.info("Night death | day=%d identity=%s cause=%s", state.day, identity, cause.value)
            died.append(state.display_name(identity))

        if outcome.saved:
            logger.info("Witch save succeeded | day=%d target=%s", state.day, state.night.kill_target)
            for witch in state.living_with_role(Role.WITCH):
                self._send(witch.identity, GameEventMessage(text="Your save worked. No one fell to the werewolves."))

        if died:
            self._announce(f"Dawn breaks. {_join_names(died)} died last night.")
        else:
            self._announce("Dawn breaks. No one died last night.")

        if self._check_victory():
            return True
        self._enter_day()
        return True

    # ======================================================================
    # Vote
    # ======================================================================

    def vote(self, actor: str, target: Optional[str]) -> CommandResult:
        state = self._state
        target_id = self._resolve_target(target)
        result = self._tally.cast(state, actor, target_id)
        if not result:
            return self._reject(actor, result)

        logger.info("Vote | day=%d voter=%s target=%s", state.day, actor, target_id)
        self._confirm(actor)
        self._announce(f"{state.display_name(actor)} voted.")
        self._broadcast_state()
        self._recheck_completion()
        return CommandResult.accept()

    def resolve_vote(self, epoch: int) -> bool:
        """Apply the vote outcome. Runs at most once per epoch."""
        state = self._state
        if state.phase != Phase.VOTE or not self._scheduler.owns(epoch) or state.resolved_epoch == epoch:
            logger.debug("Ignoring stale vote resolution | epoch=%d current=%d", epoch, self._scheduler.epoch)
            return False
        state.resolved_epoch = epoch

        outcome = self._tally.tally(state)
        logger.info("Vote resolved | day=%d outcome=%s", state.day, outcome)
        if outcome.eliminated is not None:
            name = state.display_name(outcome.eliminated)
            if state.kill(outcome.eliminated):
                logger.info(
                    "Day death | day=%d identity=%s cause=%s",
                    state.day, outcome.eliminated, DeathCause.VOTE.value,
                )
                self._announce(f"{name} was voted out with {outcome.top_count} votes.")
                player = state.get_player(outcome.eliminated)
                if player.role == Role.HUNTER:
                    self._unlock_hunter(player.identity)
            else:
                logger.warning("Elimination skipped, player missing | identity=%s", outcome.eliminated)
        elif outcome.tied_players:
            names = [state.display_name(t) for t in outcome.tied_players]
            self._announce(
                f"The vote is tied between {_join_names(names)} at {outcome.top_count} votes each. "
                "No one is eliminated."
            )
        else:
            self._announce("No votes were cast. No one is eliminated.")

        if self._check_victory():
            return True
        state.votes = {}
        state.reset_voted()
        state.day += 1
        self._enter_night()
        return True

    # ======================================================================
    # Hunter
    # ======================================================================

    def shoot(self, actor: str, target: Optional[str]) -> CommandResult:
        """Hunter's one-shot post-mortem ability after a vote elimination."""
        state = self._state
        player = state.get_player(actor)
        if (
            player is None
            or player.role != Role.HUNTER
            or player.is_alive
            or state.pending_hunter != actor
        ):
            return self._reject(actor, CommandResult.reject(ErrorCode.NOT_YOUR_TURN))
        if not state.is_playing:
            return self._reject(actor, CommandResult.reject(ErrorCode.INVALID_PHASE))

        target_id = self._resolve_target(target)
        target_player = state.get_player(target_id) if target_id is not None else None
        if target_player is None:
            return self._reject(actor, CommandResult.reject(ErrorCode.UNKNOWN_TARGET))
        if not target_player.is_alive:
            return self._reject(actor, CommandResult.reject(ErrorCode.DEAD_TARGET))

        state.pending_hunter = None
        state.kill(target_id)
        logger.info(
            "Hunter shot | hunter=%s target=%s cause=%s phase=%s",
            actor, target_id, DeathCause.HUNTER_SHOT.value, state.phase.value,
        )
        self._confirm(actor)
        self._announce(f"{player.name} fires a final shot. {target_player.name} is dead.")

        if not self._check_victory():
            self._broadcast_state()
            self._recheck_completion()
        return CommandResult.accept()

    def _unlock_hunter(self, identity: str) -> None:
        state = self._state
        state.pending_hunter = identity
        self._send(
            identity,
            NightActionRequest(verb="shoot", eligible_targets=[p.name for p in state.living_players()]),
        )

    # ======================================================================
    # Scheduler
    # ======================================================================

    def tick(self) -> None:
        """Periodic driver (about once per second).

        Fault boundary: an exception is logged and the room is pushed to a
        safe phase instead of being left without a deadline.
        """
        try:
            self._tick()
        except Exception:
            logger.exception("Tick failed | phase=%s epoch=%d", self._state.phase.value, self._scheduler.epoch)
            self._recover_from_fault()

    def _tick(self) -> None:
        state = self._state
        if not state.is_playing:
            return

        due = self._scheduler.pop_due_resolution()
        if due is not None:
            if due.kind == "night":
                self.resolve_night(due.epoch)
            elif due.kind == "vote":
                self.resolve_vote(due.epoch)

        if self._state.is_playing and self._scheduler.is_expired():
            self._on_deadline()

        remaining = self._scheduler.remaining_seconds()
        if self._state.is_playing and remaining is not None:
            self._broadcast(PhaseTimer(phase=self._state.phase, remaining_seconds=remaining))

    def _on_deadline(self) -> None:
        state = self._state
        epoch = self._scheduler.epoch
        logger.info("Deadline reached | phase=%s day=%d epoch=%d", state.phase.value, state.day, epoch)
        if state.phase == Phase.NIGHT:
            passed = self._night.mark_timeouts(state)
            if passed:
                logger.info("Night timeout passes | identities=%s", passed)
            if not self.resolve_night(epoch):
                self._force_past_resolved(Phase.NIGHT, epoch)
        elif state.phase == Phase.DAY:
            self._enter_vote()
        elif state.phase == Phase.VOTE:
            abstained = self._tally.mark_abstentions(state)
            if abstained:
                self._announce(f"Time's up. {_join_names([state.display_name(a) for a in abstained])} abstained.")
            if not self.resolve_vote(epoch):
                self._force_past_resolved(Phase.VOTE, epoch)

    def _force_past_resolved(self, phase: Phase, epoch: int) -> None:
        """Leave a phase whose resolution already ran but never advanced."""
        if self._state.phase == phase and self._scheduler.owns(epoch):
            logger.warning("Resolved phase did not advance | phase=%s epoch=%d", phase.value, epoch)
            self._recover_from_fault()

    def _recover_from_fault(self) -> None:
        state = self._state
        try:
            if self._check_victory():
                return
            if state.phase == Phase.NIGHT:
                state.resolved_epoch = self._scheduler.epoch
                self._enter_day()
            elif state.phase == Phase.VOTE:
                state.resolved_epoch = self._scheduler.epoch
                state.votes = {}
                state.reset_voted()
                state.day += 1
                self._enter_night()
            elif state.phase == Phase.DAY:
                self._enter_vote()
        except Exception:
            logger.exception("Recovery failed | phase=%s", state.phase.value)
            if state.is_playing and self._scheduler.deadline is None:
                self._scheduler.schedule_deadline(self._settings.phase_seconds(state.phase))

    def _recheck_completion(self) -> None:
        """Run the completion test of the active phase.

        Same fault boundary as tick(): a failed resolution moves the room on.
        """
        try:
            self._check_completion()
        except Exception:
            logger.exception("Resolution failed | phase=%s epoch=%d", self._state.phase.value, self._scheduler.epoch)
            self._recover_from_fault()

    def _check_completion(self) -> None:
        state = self._state
        if state.phase == Phase.NIGHT and self._night.is_complete(state):
            delay = self._settings.resolution_delay
            if delay <= 0:
                self.resolve_night(self._scheduler.epoch)
            else:
                self._scheduler.schedule_resolution("night", delay)
        elif state.phase == Phase.VOTE and self._tally.is_complete(state):
            self.resolve_vote(self._scheduler.epoch)

    # ======================================================================
    # Phase entry
    # ======================================================================

    def _enter_night(self) -> None:
        state = self._state
        state.night.reset_for_new_night()
        state.reset_acted()
        state.phase = Phase.NIGHT
        self._scheduler.enter_phase(self._settings.night_seconds)
        logger.info("Phase entered | phase=night day=%d epoch=%d", state.day, self._scheduler.epoch)
        self._broadcast(PhaseChange(phase=Phase.NIGHT, day_count=state.day))
        self._send_night_requests()
        self._broadcast_state()

    def _enter_day(self) -> None:
        state = self._state
        state.night.reset_for_new_night()
        state.reset_acted()
        state.reset_voted()
        state.phase = Phase.DAY
        self._scheduler.enter_phase(self._settings.day_seconds)
        logger.info("Phase entered | phase=day day=%d epoch=%d", state.day, self._scheduler.epoch)
        self._broadcast(PhaseChange(phase=Phase.DAY, day_count=state.day))
        self._announce("Discuss! Voting opens when the day ends.")
        self._send_night_requests()
        self._broadcast_state()

    def _enter_vote(self) -> None:
        state = self._state
        state.votes = {}
        state.reset_voted()
        state.phase = Phase.VOTE
        self._scheduler.enter_phase(self._settings.vote_seconds)
        logger.info("Phase entered | phase=vote day=%d epoch=%d", state.day, self._scheduler.epoch)
        self._broadcast(PhaseChange(phase=Phase.VOTE, day_count=state.day))
        self._announce("Voting is open. Use /vote <name>.")
        self._broadcast_state()

    def _check_victory(self) -> bool:
        """Evaluate win conditions and end the game when one holds."""
        outcome = self._evaluator.evaluate(self._state)
        if not outcome.is_game_over:
            return False
        self._end_game(outcome)
        return True

    def _end_game(self, outcome: VictoryOutcome) -> None:
        state = self._state
        state.phase = Phase.ENDED
        state.winner = outcome.winner
        state.pending_hunter = None
        self._scheduler.enter_phase()
        logger.info("Game over | outcome=%s day=%d", outcome, state.day)

        self._broadcast(PhaseChange(phase=Phase.ENDED, day_count=state.day))
        if outcome.winner is None:
            self._announce("No one survived. The game ends without a winner.")
        elif outcome.winner == Faction.WEREWOLF:
            self._announce("The werewolves have overrun the village. Werewolves win!")
        else:
            self._announce("Every werewolf is dead. The village wins!")
        self._broadcast(
            GameEnd(
                winning_faction=outcome.winner,
                players=[
                    FinalPlayer(name=p.name, role=p.role, is_alive=p.is_alive)
                    for p in state.players.values()
                ],
            )
        )
        self._broadcast_state()

    # ======================================================================
    # Outbound helpers
    # ======================================================================

    def snapshot(self) -> GameStateMessage:
        """Public view of the game. Roles appear only after the game ends."""
        state = self._state
        reveal = state.phase == Phase.ENDED
        return GameStateMessage(
            is_playing=state.is_playing,
            phase=state.phase,
            day_count=state.day,
            host_identity=state.host,
            player_count=len(state.players),
            players=[
                PlayerView(
                    name=p.name,
                    is_alive=p.is_alive,
                    has_voted=p.has_voted,
                    has_acted=p.has_acted,
                    role=p.role if reveal else None,
                )
                for p in state.players.values()
            ],
        )

    def tell(self, identity: str, text: str) -> None:
        """Private narrative line, e.g. command help."""
        self._send(identity, GameEventMessage(text=text))

    def send_state(self, identity: str) -> None:
        self._send(identity, self.snapshot())

    def remind_role(self, identity: str) -> CommandResult:
        player = self._state.get_player(identity)
        if player is None or player.role is None or self._state.phase == Phase.WAITING:
            return self._reject(identity, CommandResult.reject(ErrorCode.INVALID_PHASE, "Roles are dealt when the game starts."))
        self._send(
            identity,
            YourRole(
                role=player.role,
                description=get_definition(player.role).description,
                teammates=self._assigner.werewolf_peers(self._state).get(identity, []),
            ),
        )
        return CommandResult.accept()

    def _send_night_requests(self) -> None:
        state = self._state
        for player in self._night.night_actors(state):
            for verb in self._night.verbs_for(player.role):
                self._send(
                    player.identity,
                    NightActionRequest(
                        verb=verb.value,
                        eligible_targets=self._night.eligible_targets(state, player, verb),
                    ),
                )

    def _offer_save_to_witch(self) -> None:
        state = self._state
        for witch in state.living_with_role(Role.WITCH):
            if witch.has_acted:
                continue
            self._send(
                witch.identity,
                NightActionRequest(
                    verb=NightVerb.SAVE.value,
                    eligible_targets=self._night.eligible_targets(state, witch, NightVerb.SAVE),
                ),
            )

    def _broadcast_to_pack(self, text: str) -> None:
        state = self._state
        self._broadcaster.deliver_to_roster(
            lambda identity: state.is_werewolf(identity) and state.is_alive(identity),
            GameEventMessage(text=text),
        )

    def _resolve_target(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        player = self._state.find_player(token)
        return player.identity if player else None

    def _send(self, identity: str, message: OutboundMessage) -> None:
        self._broadcaster.deliver_to_identity(identity, message)

    def _broadcast(self, message: OutboundMessage) -> None:
        self._broadcaster.deliver_to_roster(everyone, message)

    def _announce(self, text: str) -> None:
        self._broadcast(GameEventMessage(text=text))

    def _broadcast_state(self) -> None:
        self._broadcast(self.snapshot())

    def _confirm(self, identity: str) -> None:
        self._send(identity, ActionConfirm())

    def reject(self, identity: str, result: CommandResult) -> CommandResult:
        """Tell the actor privately why a command was refused."""
        return self._reject(identity, result)

    def _reject(self, identity: str, result: CommandResult) -> CommandResult:
        logger.debug("Rejected | actor=%s code=%s", identity, result.error)
        self._send(identity, ErrorMessage(code=result.error, message=result.message))
        return result
