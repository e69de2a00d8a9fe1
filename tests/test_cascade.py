"""Tests for cascade resolution."""

import itertools

import pytest

from boards import BOARD_A, UniqueKindFactory, make_level
from tilematch.game.cascade import CascadePhase, CascadeResolver, CascadeResult
from tilematch.game.matcher import detect_swap_match, find_matches
from tilematch.models.card import TILE_SIZE, CardState
from tilematch.models.grid import CardFactory, Grid


class ScriptedFactory(CardFactory):
    """Refills with a fixed sequence of kinds, then unique ones."""

    def __init__(self, level, kinds):
        super().__init__(level)
        self._kinds = itertools.chain(kinds, itertools.count(200))

    def _roll_kind(self) -> int:
        return next(self._kinds)

    def _roll_trap(self) -> bool:
        return False


def make_resolver(grid: Grid, factory: CardFactory | None = None, **kwargs) -> CascadeResolver:
    return CascadeResolver(grid, factory or UniqueKindFactory(make_level()), 3, **kwargs)


def swap_at(grid: Grid, pos_a, pos_b) -> None:
    grid.swap(grid.get(*pos_a), grid.get(*pos_b))


class TestCompaction:
    """Tests for gravity."""

    def test_survivors_keep_order(self):
        """Test that survivors fall in order and top cells empty."""
        grid = Grid.from_kinds([
            [1],
            [2],
            [3],
            [4],
            [5],
        ])
        top, second, bottom = grid.get(0, 0), grid.get(1, 0), grid.get(4, 0)
        grid.get(2, 0).mark_removed()
        grid.get(3, 0).mark_removed()

        make_resolver(grid).compact()

        assert grid.get(0, 0) is None
        assert grid.get(1, 0) is None
        assert grid.get(2, 0) is top
        assert grid.get(3, 0) is second
        assert grid.get(4, 0) is bottom
        assert top.drop_distance == 2
        assert second.drop_distance == 2
        assert bottom.drop_distance == 0
        assert top.top == 2 * TILE_SIZE
        assert grid.is_consistent()

    def test_columns_independent(self):
        """Test that columns compact independently."""
        grid = Grid.from_kinds([
            [1, 2],
            [3, 4],
        ])
        grid.get(1, 1).mark_removed()
        make_resolver(grid).compact()
        assert grid.kinds() == [[1, None], [3, 2]]


class TestRefill:
    """Tests for refilling."""

    def test_fills_only_empty_cells(self):
        """Test that refill creates cards for the top gaps."""
        grid = Grid.from_kinds([[1, 2], [3, 4]])
        grid.clear_cell(0, 1)
        keep = grid.get(1, 1)

        created = make_resolver(grid).refill()

        assert created == 1
        assert grid.get(1, 1) is keep
        assert grid.get(0, 1) is not None
        assert grid.is_consistent()

    def test_entering_cards(self):
        """Test that entering refills start above the grid."""
        grid = Grid.from_kinds([[1, 2], [3, 4]])
        grid.clear_cell(0, 0)
        make_resolver(grid).refill(entering=True)
        card = grid.get(0, 0)
        assert card.is_new
        assert card.top == -TILE_SIZE
        assert card.state == CardState.NORMAL


class TestCascade:
    """Tests for the full cascade."""

    def test_single_wave(self):
        """Test a cascade that settles after one removal."""
        grid = Grid.from_kinds(BOARD_A)
        swap_at(grid, (0, 2), (0, 3))
        removed_groups = []
        resolver = make_resolver(grid, on_remove=lambda m: removed_groups.append(m) or True)

        outcome = resolver.run(find_matches(grid))

        assert outcome.result == CascadeResult.SETTLED
        assert outcome.waves == 1
        assert outcome.removed == 3
        assert len(removed_groups) == 1
        assert len(grid.cards()) == 20
        assert all(c.state == CardState.NORMAL for c in grid.cards())
        assert not any(c.is_new for c in grid.cards())
        assert all(c.top == c.row * TILE_SIZE for c in grid.cards())
        assert find_matches(grid) == []
        assert not resolver.is_running

    def test_chain_reaction(self):
        """Test that refills forming new runs trigger another wave."""
        grid = Grid.from_kinds([
            [1, 1, 2, 1],
            [3, 4, 5, 6],
            [7, 8, 9, 10],
            [8, 8, 11, 12],
        ])
        swap_at(grid, (0, 2), (0, 3))
        # Refill of row 0 cols 0..2 creates a run of three 20s
        factory = ScriptedFactory(make_level(), [20, 20, 20])
        waves = []
        resolver = make_resolver(grid, factory, on_remove=lambda m: waves.append(m) or True)

        outcome = resolver.run(find_matches(grid))

        assert outcome.waves == 2
        assert outcome.removed == 6
        assert len(waves) == 2
        assert find_matches(grid) == []

    def test_no_moves(self):
        """Test a cascade that leaves no legal move."""
        grid = Grid.from_kinds([
            [1, 1, 2, 1],
            [3, 4, 5, 6],
            [7, 8, 9, 10],
        ])
        swap_at(grid, (0, 2), (0, 3))
        outcome = make_resolver(grid).run(find_matches(grid))
        assert outcome.result == CascadeResult.NO_MOVES

    def test_halted_by_hook(self):
        """Test that the removal hook can stop the cascade."""
        grid = Grid.from_kinds(BOARD_A)
        swap_at(grid, (0, 2), (0, 3))
        resolver = make_resolver(grid, on_remove=lambda m: False)

        outcome = resolver.run(find_matches(grid))

        assert outcome.result == CascadeResult.HALTED
        assert outcome.removed == 3
        assert all(grid.get(0, c).is_removed for c in range(3))

    def test_phase_order(self):
        """Test the phase sequence of one wave."""
        grid = Grid.from_kinds(BOARD_A)
        swap_at(grid, (0, 2), (0, 3))
        phases = []
        resolver = make_resolver(grid, on_phase=phases.append)

        resolver.run(find_matches(grid))

        assert phases == [
            CascadePhase.REMOVING,
            CascadePhase.COMPACTING,
            CascadePhase.REFILLING,
            CascadePhase.SETTLING,
            CascadePhase.IDLE,
        ]

    def test_step_by_step(self):
        """Test manual stepping leaves gaps visible between phases."""
        grid = Grid.from_kinds(BOARD_A)
        swap_at(grid, (0, 2), (0, 3))
        resolver = make_resolver(grid)
        resolver.begin(find_matches(grid))

        assert resolver.step() == CascadePhase.COMPACTING
        assert grid.get(0, 0).is_removed
        assert resolver.step() == CascadePhase.REFILLING
        assert grid.get(0, 0) is None
        assert resolver.step() == CascadePhase.SETTLING
        assert grid.get(0, 0).is_new
        assert resolver.step() == CascadePhase.IDLE
        assert resolver.outcome.result == CascadeResult.SETTLED

    def test_removal_list(self):
        """Test that removed cards are queued for removal effects."""
        grid = Grid.from_kinds(BOARD_A)
        swap_at(grid, (0, 2), (0, 3))
        resolver = make_resolver(grid)
        resolver.run(find_matches(grid))

        removed = resolver.drain_removed()
        assert len(removed) == 3
        assert all(c.is_removed for c in removed)
        assert resolver.drain_removed() == []

    def test_begin_without_matches(self):
        """Test that an empty cascade is rejected."""
        with pytest.raises(ValueError):
            make_resolver(Grid.from_kinds(BOARD_A)).begin([])

    def test_begin_while_running(self):
        """Test that overlapping cascades are rejected."""
        grid = Grid.from_kinds(BOARD_A)
        swap_at(grid, (0, 2), (0, 3))
        resolver = make_resolver(grid)
        matches = find_matches(grid)
        resolver.begin(matches)
        with pytest.raises(RuntimeError):
            resolver.begin(matches)


class TestInitialCleanup:
    """Tests for silent cleanup of generated boards."""

    def test_clears_runs(self):
        """Test that initial runs are removed without a removal list."""
        grid = Grid.from_kinds([
            [1, 1, 1, 2],
            [3, 4, 5, 6],
        ])
        resolver = make_resolver(grid)

        passes = resolver.clear_initial_matches()

        assert passes == 1
        assert find_matches(grid) == []
        assert resolver.removal_list == []
        assert not any(c.is_new for c in grid.cards())
        assert len(grid.cards()) == 8

    def test_clean_board(self):
        """Test that a clean board takes no passes."""
        grid = Grid.from_kinds(BOARD_A)
        before = grid.snapshot()
        assert make_resolver(grid).clear_initial_matches() == 0
        assert grid.snapshot() == before

    def test_pass_limit(self):
        """Test that cleanup gives up after the pass limit."""
        grid = Grid.from_kinds([[1, 1, 1]])
        factory = ScriptedFactory(make_level(), itertools.repeat(1))
        assert make_resolver(grid, factory).clear_initial_matches(max_passes=5) == 5
        assert find_matches(grid)


class TestSwapDetectionDuringCascade:
    """Tests that hypothetical swaps leave cascaded boards intact."""

    def test_detection_after_cascade(self):
        """Test detect_swap_match on a refilled board."""
        grid = Grid.from_kinds(BOARD_A)
        swap_at(grid, (0, 2), (0, 3))
        make_resolver(grid).run(find_matches(grid))
        before = grid.snapshot()
        assert detect_swap_match(grid, (2, 2), (2, 3))
        assert grid.snapshot() == before
