"""Game session controller."""

from __future__ import annotations

import logging
import random
from typing import Callable

from tilematch.bridge import HostBridge, ResultRecord
from tilematch.catalog import LevelCatalog
from tilematch.config import Config
from tilematch.logging import GameLogger
from tilematch.models.card import Card, CardState
from tilematch.models.events import (
    HintEvent,
    LevelChangeEvent,
    LoseEvent,
    ScoreEvent,
    ShuffleEvent,
    WinEvent,
)
from tilematch.models.game_state import (
    GameResult,
    LoseReason,
    SessionPhase,
    SessionState,
    SoundKey,
)
from tilematch.models.grid import CardFactory, Grid
from tilematch.models.level import LevelDefinition

from .cascade import CascadePhase, CascadeResolver, CascadeResult
from .clock import CountdownTimer, ManualScheduler, Scheduler, TimerHandle
from .matcher import MatchGroup, find_hint_pair, find_matches, has_possible_move, is_adjacent
from .scoring import score_matches

logger = logging.getLogger(__name__)


class GameSession:
    """Top-level game state machine.

    Owns the grid, the score and the level limits, and exposes the player
    operations (select, shuffle, hint, pause, level changes). Outcomes are
    reported through callbacks registered with ``set_callbacks``.
    """

    def __init__(
        self,
        config: Config | None = None,
        levels: list[LevelDefinition] | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        bridge: HostBridge | None = None,
        game_logger: GameLogger | None = None,
        factory_class: type[CardFactory] = CardFactory,
    ):
        """Initialize game session.

        Args:
            config: Configuration (uses defaults if not provided)
            levels: Level list (resolved from config if not provided)
            scheduler: Timer source (a ManualScheduler if not provided)
            rng: Random source for card creation and shuffles
            bridge: Host bridge for result reporting and host signals
            game_logger: GameLogger instance for detailed logging
            factory_class: Card factory used for fills and refills
        """
        self.config = config or Config()
        self.timing = self.config.timing
        self.catalog = LevelCatalog(levels) if levels else LevelCatalog.from_config(self.config)
        self.scheduler = scheduler or ManualScheduler()
        self.rng = rng or random.Random()
        self.bridge = bridge
        self.game_logger = game_logger
        self.palette = self.config.assets.palette()
        self.factory_class = factory_class

        audio = self.config.audio
        self.state = SessionState(
            volume=audio.volume,
            is_sound_enabled=audio.sound and audio.volume > 0,
        )

        self.level: LevelDefinition = self.catalog.get(self.config.game.level_index)
        self.grid = Grid(0, 0, self.timing.tile_size)
        self.factory = self.factory_class(self.level, self.palette, self.rng, self.timing.tile_size)
        self.resolver = self._make_resolver()
        self.selected: Card | None = None

        self._started = False
        self._checkpoint = 0  # Total score at level start
        self._levels_won = 0
        self._countdown = CountdownTimer(self.scheduler, self._on_tick, self.timing.tick_interval)
        self._hint_handle: TimerHandle | None = None
        self._cascade_handle: TimerHandle | None = None

        self._on_score: Callable[[ScoreEvent], None] | None = None
        self._on_level_change: Callable[[LevelChangeEvent], None] | None = None
        self._on_win: Callable[[WinEvent], None] | None = None
        self._on_lose: Callable[[LoseEvent], None] | None = None
        self._on_click: Callable[[], None] | None = None
        self._on_shuffle: Callable[[ShuffleEvent], None] | None = None
        self._on_hint: Callable[[HintEvent], None] | None = None
        self._on_sound: Callable[[SoundKey, float], None] | None = None

        if self.bridge:
            self.bridge.add_pause_listener(self.pause)
            self.bridge.add_resume_listener(self.resume)
            self.bridge.add_volume_listener(self.set_volume)

    def set_callbacks(
        self,
        on_score: Callable[[ScoreEvent], None] | None = None,
        on_level_change: Callable[[LevelChangeEvent], None] | None = None,
        on_win: Callable[[WinEvent], None] | None = None,
        on_lose: Callable[[LoseEvent], None] | None = None,
        on_click: Callable[[], None] | None = None,
        on_shuffle: Callable[[ShuffleEvent], None] | None = None,
        on_hint: Callable[[HintEvent], None] | None = None,
        on_sound: Callable[[SoundKey, float], None] | None = None,
    ) -> None:
        """Set event callbacks.

        Args:
            on_score: Called after each scoring event
            on_level_change: Called when a level is (re)loaded
            on_win: Called when the level target is reached
            on_lose: Called when the level is lost (score already rolled back)
            on_click: Called after a handled card click
            on_shuffle: Called after a shuffle power-up
            on_hint: Called after a hint power-up
            on_sound: Called with (sound key, volume) while sound is enabled
        """
        self._on_score = on_score
        self._on_level_change = on_level_change
        self._on_win = on_win
        self._on_lose = on_lose
        self._on_click = on_click
        self._on_shuffle = on_shuffle
        self._on_hint = on_hint
        self._on_sound = on_sound

    # Properties

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def level_index(self) -> int:
        return self.state.level_index

    @property
    def cards(self) -> list[Card]:
        """All cards in row-major order."""
        return self.grid.cards()

    @property
    def levels(self) -> list[LevelDefinition]:
        return self.catalog.all()

    @property
    def levels_won(self) -> int:
        return self._levels_won

    @property
    def checkpoint(self) -> int:
        """Total score recorded at level start."""
        return self._checkpoint

    # Level lifecycle

    def start(self, board: Grid | None = None) -> None:
        """Start the session at the configured level.

        Args:
            board: Preset board for the first level (generated if None).
        """
        self._started = True
        if self.game_logger:
            self.game_logger.log_session_start(self.catalog.all())
        self._apply_level(self.config.game.level_index, reset_total=True, board=board)

    def retry_level(self, board: Grid | None = None) -> None:
        """Reload the current level, keeping the total score."""
        self._apply_level(self.state.level_index, reset_total=False, board=board)

    def restart(self) -> None:
        """Alias of ``retry_level``."""
        self.retry_level()

    def next_level(self, board: Grid | None = None) -> None:
        """Advance to the next level (the final level repeats)."""
        index = self.state.level_index
        if not self.catalog.is_last(index):
            index += 1
        self._apply_level(index, reset_total=False, board=board)

    def stop(self) -> None:
        """End the session: cancel timers and close the replay log entry."""
        self._countdown.stop()
        self._cancel_cascade_timer()
        self._clear_hint_highlights()
        if self.game_logger:
            self.game_logger.log_session_end(self.state.score, self._levels_won)

    def _apply_level(self, index: int, reset_total: bool, board: Grid | None = None) -> None:
        index = self.catalog.clamp_index(index)
        level = self.catalog.get(index)
        self.level = level

        self._countdown.stop()
        self._cancel_cascade_timer()
        self._clear_hint_highlights()

        state = self.state
        state.reset_for_level(index)
        state.remaining_time = level.time_limit
        state.remaining_moves = level.move_limit
        state.shuffles_left = level.shuffles
        state.hints_left = level.hints
        state.score = 0 if reset_total else self._checkpoint
        self._checkpoint = state.score
        self.selected = None

        self.factory = self.factory_class(level, self.palette, self.rng, self.timing.tile_size)
        if board is not None:
            self.grid = board
        else:
            self.grid = self.factory.fill(level.rows, level.cols)
        self.resolver = self._make_resolver()

        if self._on_level_change:
            self._on_level_change(LevelChangeEvent(level=level, index=index))

        passes = self.resolver.clear_initial_matches()
        if passes:
            logger.debug(f"Initial board settled after {passes} cleanup passes")

        logger.info(
            f"Level {level.id} ({level.display_name}) started: "
            f"{self.grid.rows}x{self.grid.cols}, target {level.target_score}"
        )
        if self.game_logger:
            self.game_logger.log_level_start(level, index, self.grid, state.score)

        if not has_possible_move(self.grid, level.min_match):
            self._handle_lose(LoseReason.NO_MOVES)
            return

        self._start_countdown()

    def _make_resolver(self) -> CascadeResolver:
        return CascadeResolver(
            self.grid,
            self.factory,
            self.level.min_match,
            on_remove=self._on_cascade_remove,
            on_phase=self._on_cascade_phase,
        )

    # Player input

    def _accepts_input(self) -> bool:
        state = self.state
        return (
            self._started
            and not state.is_game_over
            and not state.is_paused
            and not state.animation_in_progress
        )

    def select(self, card: Card) -> None:
        """Handle a click on a card.

        Selects it, swaps it with an adjacent selected card, or moves the
        selection. Ignored while paused, over, or during a cascade.
        """
        if not self._accepts_input():
            return
        if card.state == CardState.REMOVED or not self.grid.contains(card):
            return
        self._clear_hint_highlights()

        if card.state == CardState.NORMAL:
            self._play_sound(SoundKey.SELECT)

        if self.selected is None:
            self.selected = card
            card.state = CardState.SELECTED
            if self._on_click:
                self._on_click()
            return

        if self.selected is card:
            return

        if is_adjacent(self.selected, card):
            self._attempt_swap(self.selected, card)
        else:
            self.selected.state = CardState.NORMAL
            self.selected = card
            card.state = CardState.SELECTED

        if self._on_click:
            self._on_click()

    def select_at(self, row: int, col: int) -> None:
        """Handle a click on the card at (row, col)."""
        card = self.grid.get(row, col)
        if card is not None:
            self.select(card)

    def back(self) -> None:
        """Drop the current selection."""
        if self.selected is not None:
            self.selected.state = CardState.NORMAL
            self.selected = None

    def _attempt_swap(self, first: Card, second: Card) -> None:
        self.selected = None
        if self.state.remaining_moves == 0:
            # No budget left: the attempt ends the level before any swap
            first.state = CardState.NORMAL
            self._check_limits()
            return
        self._consume_move()
        from_pos, to_pos = first.position, second.position

        self.grid.swap(first, second)
        matches = find_matches(self.grid, self.level.min_match)
        logger.debug(f"Swap {from_pos}<->{to_pos}: {len(matches)} matches")
        if self.game_logger:
            self.game_logger.log_swap(
                self.level.id, from_pos, to_pos,
                matched=bool(matches),
                moves_left=self.state.remaining_moves,
            )

        if matches:
            self._start_cascade(matches)
            if first.state == CardState.SELECTED:
                first.state = CardState.NORMAL
            return

        self.grid.swap(first, second)
        first.state = CardState.NORMAL
        self.state.combo_streak = 0
        self._check_limits()

    def _consume_move(self) -> None:
        moves = self.state.remaining_moves
        if moves is not None and moves > 0:
            self.state.remaining_moves = moves - 1

    def _check_limits(self) -> None:
        """Lose on an exhausted move budget below target."""
        state = self.state
        if state.is_game_over:
            return
        if state.remaining_moves == 0 and state.level_score < self.level.target_score:
            self._handle_lose(LoseReason.MOVES)

    # Cascades

    def _start_cascade(self, matches: list[MatchGroup]) -> None:
        self.state.animation_in_progress = True
        self.resolver.begin(matches)
        self._advance_cascade()

    def _advance_cascade(self) -> None:
        self._cascade_handle = None
        while True:
            phase = self.resolver.step()
            if not self.resolver.is_running:
                self._finish_cascade()
                return
            if self.timing.paced_cascades:
                self._cascade_handle = self.scheduler.call_later(
                    self._phase_delay(phase), self._advance_cascade
                )
                return

    def _phase_delay(self, phase: CascadePhase) -> float:
        if phase == CascadePhase.COMPACTING:
            return self.timing.phase_delay
        if phase == CascadePhase.SETTLING:
            return self.timing.phase_delay + self.timing.settle_delay
        return 0.0

    def _cancel_cascade_timer(self) -> None:
        if self._cascade_handle is not None:
            self._cascade_handle.cancel()
            self._cascade_handle = None

    def _finish_cascade(self) -> None:
        self.state.animation_in_progress = False
        outcome = self.resolver.outcome
        if outcome is None:
            return
        if outcome.result == CascadeResult.NO_MOVES:
            self._handle_lose(LoseReason.NO_MOVES)
        elif outcome.result == CascadeResult.SETTLED:
            self._check_limits()

    def _on_cascade_phase(self, phase: CascadePhase) -> None:
        logger.debug(f"Level {self.level.id} cascade: {phase.value}")

    def _on_cascade_remove(self, matches: list[MatchGroup]) -> bool:
        """Apply scoring for one removal pass; False halts the cascade."""
        state = self.state
        if state.is_game_over:
            return False

        breakdown = score_matches(matches, state.combo_streak, self.level.combo_bonus)
        state.combo_streak = breakdown.next_streak
        state.level_score += breakdown.gained
        state.score += breakdown.gained

        if self._on_score:
            self._on_score(ScoreEvent(
                total=state.score,
                level_score=state.level_score,
                gained=breakdown.gained,
                base=breakdown.base,
                combo=breakdown.combo,
                multiplier=breakdown.multiplier,
                contains_trap=breakdown.contains_trap,
                target=self.level.target_score,
            ))
        if self.game_logger:
            self.game_logger.log_cascade(
                self.level.id,
                wave=self.resolver.waves,
                cards=[card for group in matches for card in group],
                gained=breakdown.gained,
                combo=breakdown.combo,
                contains_trap=breakdown.contains_trap,
            )

        if state.level_score >= self.level.target_score:
            self._handle_win()
            return False

        self._play_sound(SoundKey.LOSE if breakdown.contains_trap else SoundKey.MATCH)
        return True

    def drain_removed(self) -> list[Card]:
        """Take the cards removed since the last call (for removal effects)."""
        return self.resolver.drain_removed()

    # Power-ups

    def use_shuffle(self) -> None:
        """Randomly permute all live cards. No-op without allowance."""
        if self.state.shuffles_left <= 0 or not self._accepts_input():
            return

        state = self.state
        state.shuffles_left -= 1
        state.combo_streak = 0
        self._clear_hint_highlights()
        self.back()

        cards = self.grid.live_cards()
        self.rng.shuffle(cards)
        remaining = iter(cards)
        for r in range(self.grid.rows):
            for c in range(self.grid.cols):
                self.grid.set(r, c, next(remaining))

        logger.info(f"Shuffle used, {state.shuffles_left} left")
        if self._on_shuffle:
            self._on_shuffle(ShuffleEvent(shuffles_left=state.shuffles_left))
        if self.game_logger:
            self.game_logger.log_power_up(
                self.level.id, "shuffle", state.shuffles_left,
                {"board": [",".join(str(k) for k in row) for row in self.grid.kinds()]},
            )

        if not has_possible_move(self.grid, self.level.min_match):
            self._handle_lose(LoseReason.NO_MOVES)

    def use_hint(self) -> tuple[Card, Card] | None:
        """Highlight a swappable pair for a short time.

        Returns:
            The hinted pair, or None if nothing happened.
        """
        if self.state.hints_left <= 0 or not self._accepts_input():
            return None

        pair = find_hint_pair(self.grid, self.level.min_match)
        if pair is None:
            self._handle_lose(LoseReason.NO_MOVES)
            return None

        state = self.state
        state.hints_left -= 1
        self._clear_hint_highlights()
        for card in pair:
            card.is_hinted = True
        self._hint_handle = self.scheduler.call_later(
            self.timing.hint_clear_delay, lambda: self._expire_hint(pair)
        )

        logger.info(f"Hint used, {state.hints_left} left")
        if self._on_hint:
            self._on_hint(HintEvent(
                hints_left=state.hints_left,
                card_ids=(pair[0].card_id, pair[1].card_id),
            ))
        if self.game_logger:
            self.game_logger.log_power_up(
                self.level.id, "hint", state.hints_left,
                {"pair": [list(pair[0].position), list(pair[1].position)]},
            )
        return pair

    def _expire_hint(self, pair: tuple[Card, Card]) -> None:
        self._hint_handle = None
        for card in pair:
            card.is_hinted = False

    def _clear_hint_highlights(self) -> None:
        if self._hint_handle is not None:
            self._hint_handle.cancel()
            self._hint_handle = None
        for card in self.grid.cards():
            card.is_hinted = False

    # Timers

    def _start_countdown(self) -> None:
        if self.state.remaining_time is not None:
            self._countdown.start()

    def _on_tick(self) -> None:
        state = self.state
        if state.is_paused or state.is_game_over or state.remaining_time is None:
            return
        if state.remaining_time > 0:
            state.remaining_time -= 1
            if state.remaining_time <= 0:
                state.remaining_time = 0
                self._handle_lose(LoseReason.TIME)

    def pause(self) -> None:
        """Halt the countdown and block input."""
        if self.state.is_game_over:
            return
        self.state.is_paused = True
        self._countdown.stop()

    def resume(self) -> None:
        """Restart the countdown and accept input again."""
        if self.state.is_game_over or not self.state.is_paused:
            return
        self.state.is_paused = False
        self._start_countdown()

    def toggle_pause(self) -> None:
        if self.state.is_paused:
            self.resume()
        else:
            self.pause()

    # Audio

    def set_volume(self, volume: float) -> None:
        """Set output volume (0..1); zero disables sound."""
        self.state.volume = min(max(volume, 0.0), 1.0)
        self.state.is_sound_enabled = self.state.volume > 0

    def toggle_sound(self) -> None:
        state = self.state
        state.is_sound_enabled = not state.is_sound_enabled
        state.volume = (state.volume or 1.0) if state.is_sound_enabled else 0.0

    def _play_sound(self, key: SoundKey) -> None:
        if self.state.is_sound_enabled and self._on_sound:
            self._on_sound(key, self.state.volume)

    # Outcomes

    def _end_level(self, result: GameResult) -> None:
        state = self.state
        state.is_game_over = True
        state.last_result = result
        self._countdown.stop()
        self.back()

    def _handle_win(self) -> None:
        state = self.state
        if state.is_game_over:
            return
        self._end_level(GameResult.WIN)
        self._checkpoint = state.score
        self._levels_won += 1
        self._play_sound(SoundKey.WIN)
        logger.info(f"Level {self.level.id} won with {state.level_score}/{self.level.target_score}")

        if self._on_win:
            self._on_win(WinEvent(
                score=state.score,
                level=self.level,
                level_score=state.level_score,
                target_score=self.level.target_score,
                remaining_time=state.remaining_time,
                remaining_moves=state.remaining_moves,
            ))
        if self.game_logger:
            self.game_logger.log_level_end(
                self.level.id, GameResult.WIN, state.score, state.level_score
            )
        self._report(GameResult.WIN)

    def _handle_lose(self, reason: LoseReason) -> None:
        state = self.state
        if state.is_game_over:
            return
        self._end_level(GameResult.LOSE)
        state.lose_reason = reason
        state.score = self._checkpoint
        self._play_sound(SoundKey.LOSE)
        logger.info(f"Level {self.level.id} lost ({reason.value})")

        if self._on_lose:
            self._on_lose(LoseEvent(
                score=state.score,
                level=self.level,
                reason=reason,
                level_score=state.level_score,
                target_score=self.level.target_score,
            ))
        if self.game_logger:
            self.game_logger.log_level_end(
                self.level.id, GameResult.LOSE, state.score, state.level_score, reason
            )
        self._report(GameResult.LOSE, reason)

    def result_record(self, result: GameResult, reason: LoseReason | None = None) -> ResultRecord:
        """Build the result record reported to the host."""
        state = self.state
        return ResultRecord(
            score=state.score,
            level=self.level.id,
            result=result.value,
            reason=reason.value if reason else None,
            level_score=state.level_score,
            target_score=self.level.target_score,
            moves_left=state.remaining_moves,
            time_left=state.remaining_time,
        )

    def _report(self, result: GameResult, reason: LoseReason | None = None) -> None:
        if self.bridge is None:
            return
        record = self.result_record(result, reason)
        try:
            response = self.bridge.post_score(record)
        except Exception as e:
            logger.warning(f"Score report failed: {e}")
            return
        if not response.ok:
            logger.warning(f"Score report failed: {response.message}")
