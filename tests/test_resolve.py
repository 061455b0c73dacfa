"""Tests for the round resolver.

Critical scenarios tested:
- Same config and seed always give the same result
- total_win equals the sum of combination payouts
- Known seeds on the default 5x3 lines config
- Cascades, the cascade limit and scatter features
- Local recovery from config anomalies (diagnostics)
- Ticket flow: presentation seed, forced tiers, multipliers
"""

from decimal import Decimal

import pytest

from slotmath.schemas.game_config import (
    ChanceFeature,
    ClusterMechanism,
    LinesMechanism,
    MultiplierFeature,
    SymbolDef,
    TicketCategory,
    TicketConfig,
    TicketFeatures,
)
from slotmath.schemas.round_result import Diagnostic, RoundResult, TicketResult
from slotmath.services.engine import resolve, resolve_round, resolve_ticket
from slotmath.services.engine.resolve import free_spins_for

from .conftest import (
    ABC123_GRID,
    LINE_WIN_GRID,
    SEED_ABC123,
    SEED_LINE_WIN,
    create_cluster_config,
    create_lines_config,
    create_losing_ticket,
    create_symbols,
    create_ticket_config,
    create_ways_config,
    create_winning_ticket,
)

SEEDS = [f"round:{i}" for i in range(60)]


class TestKnownSeeds:
    """Fixed outcomes on the default 5x3 lines config."""

    def test_abc123_reproduces_grid_and_total(self, lines_config):
        first = resolve_round(lines_config, SEED_ABC123)
        second = resolve_round(lines_config, SEED_ABC123)
        assert first.grid == ABC123_GRID
        assert first.initial_grid == ABC123_GRID
        assert first.total_win == Decimal("0.00")
        assert first.combinations == []
        assert first.model_dump() == second.model_dump()

    def test_line_win_seed(self, lines_config):
        result = resolve_round(lines_config, SEED_LINE_WIN)
        assert result.grid == LINE_WIN_GRID
        assert len(result.combinations) == 1
        win = result.combinations[0]
        assert win.line_index == 6
        assert win.symbol == "L2"
        assert win.count == 3
        assert win.positions == [(0, 0), (0, 1), (1, 2)]
        # (3 - 2) * 5 * (10 / 20)
        assert win.payout_cents == 250
        assert result.total_win == Decimal("2.50")
        assert result.bet_normalized_multiplier == Decimal("0.2500")
        assert result.is_win

    def test_default_config_diagnostics(self, lines_config):
        result = resolve_round(lines_config, SEED_ABC123)
        assert Diagnostic.DEFAULT_ALPHABET.value in result.diagnostics
        assert Diagnostic.DEFAULT_LINES.value in result.diagnostics


class TestDeterminismAndConservation:
    """Properties over many seeds and every mechanism."""

    @pytest.mark.parametrize(
        "config",
        [create_lines_config(), create_ways_config(), create_cluster_config()],
        ids=["lines", "ways", "cluster"],
    )
    def test_deterministic(self, config):
        for seed in SEEDS[:20]:
            assert resolve(config, seed).model_dump() == resolve(config, seed).model_dump()

    @pytest.mark.parametrize(
        "config",
        [create_lines_config(), create_ways_config(), create_cluster_config()],
        ids=["lines", "ways", "cluster"],
    )
    def test_total_equals_sum_of_payouts(self, config):
        for seed in SEEDS:
            result = resolve_round(config, seed)
            assert result.total_win_cents == sum(c.payout_cents for c in result.combinations)
            assert result.total_win == sum((c.payout for c in result.combinations), Decimal("0"))

    def test_integer_and_string_seeds_supported(self, lines_config):
        result = resolve_round(lines_config, 12345)
        assert result.seed == "12345"
        assert len(result.grid) == 3
        assert result.model_dump() == resolve_round(lines_config, "12345").model_dump()

    def test_zero_seed_grid_is_not_uniform(self, lines_config):
        result = resolve_round(lines_config, 0)
        assert result.grid == [
            ["H2", "H3", "L1", "H1", "L1"],
            ["H2", "H3", "H1", "H1", "L3"],
            ["L3", "L3", "L1", "L1", "H1"],
        ]
        assert len({symbol for row in result.grid for symbol in row}) > 1

    def test_positions_in_bounds(self):
        configs = [create_lines_config(), create_ways_config(), create_cluster_config()]
        for config in configs:
            for seed in SEEDS[:30]:
                result = resolve_round(config, seed)
                for combination in result.combinations:
                    for row, col in combination.positions:
                        assert 0 <= row < config.rows
                        assert 0 <= col < config.cols


class TestCascades:
    """Cascade behaviour through the resolver."""

    def test_cluster_cascades_by_default(self, cluster_config):
        assert cluster_config.cascade_enabled
        results = [resolve_round(cluster_config, seed) for seed in SEEDS]
        assert any(r.cascade_count > 0 for r in results)
        for result in results:
            assert result.cascade_count <= cluster_config.max_cascades
            assert len(result.cascades) == result.cascade_count
            assert ("cascade" in result.features_triggered) == (result.cascade_count > 0)
            assert all(c.cascade_index <= result.cascade_count for c in result.combinations)
            if result.cascades:
                assert result.cascades[-1].grid == result.grid

    def test_cascading_can_be_disabled(self):
        config = create_cluster_config(cascading=False)
        for seed in SEEDS[:20]:
            result = resolve_round(config, seed)
            assert result.cascade_count == 0
            assert result.grid == result.initial_grid

    def test_lines_do_not_cascade_unless_enabled(self, lines_config):
        assert not lines_config.cascade_enabled
        assert create_lines_config(cascading=True).cascade_enabled

    def test_cascade_limit(self):
        """A single-symbol cluster game wins on every grid."""
        config = create_cluster_config(
            rows=3,
            cols=3,
            symbols=[SymbolDef(id="A")],
            max_cascades=3,
        )
        result = resolve_round(config, "limit")
        assert result.cascade_count == 3
        assert result.cascade_limit_reached
        assert Diagnostic.CASCADE_LIMIT_REACHED.value in result.diagnostics
        assert len(result.combinations) == 4
        # 9 * 0.5 * 10 / 10 per evaluation
        assert result.total_win_cents == 4 * 450


class TestScatterFeature:
    """Scatters counted on the initial grid."""

    def test_free_spins_awarded(self):
        config = create_lines_config(symbols=[SymbolDef(id="S", is_scatter=True)])
        result = resolve_round(config, "scatter")
        assert result.scatter_count == 15
        assert result.free_spins_awarded == 20
        assert "free_spins" in result.features_triggered
        assert result.combinations == []

    def test_free_spins_lookup(self):
        award = {3: 8, 4: 12, 5: 20}
        assert free_spins_for(award, 2) == 0
        assert free_spins_for(award, 3) == 8
        assert free_spins_for(award, 4) == 12
        assert free_spins_for(award, 9) == 20


class TestRecovery:
    """Config anomalies are recovered locally."""

    def test_zero_weight_alphabet_falls_back(self):
        config = create_lines_config(symbols=[SymbolDef(id="A", weight=0)])
        result = resolve_round(config, SEED_ABC123)
        assert result.grid == ABC123_GRID
        assert Diagnostic.DEFAULT_ALPHABET.value in result.diagnostics

    def test_configured_alphabet_has_no_diagnostic(self):
        config = create_lines_config(symbols=create_symbols("A", "B", "C"))
        result = resolve_round(config, SEED_ABC123)
        assert Diagnostic.DEFAULT_ALPHABET.value not in result.diagnostics

    def test_unusable_lines_skipped(self):
        config = create_lines_config(
            symbols=[SymbolDef(id="A")],
            mechanism=LinesMechanism(lines=[[0, 0, 0, 0, 0, 0], [3, 3, 3, 3, 3], [1, 1, 1, 1, 1]]),
        )
        result = resolve_round(config, "skip")
        assert Diagnostic.LINE_SKIPPED.value in result.diagnostics
        assert [c.line_index for c in result.combinations] == [3]

    def test_json_serialisable(self, lines_config):
        payload = resolve_round(lines_config, SEED_LINE_WIN).model_dump(mode="json")
        assert payload["total_win"] == "2.50"
        assert payload["combinations"][0]["payout"] == "2.50"


class TestResolveDispatch:
    """resolve() picks the family."""

    def test_reel_config(self, lines_config):
        assert isinstance(resolve(lines_config, "x"), RoundResult)

    def test_ticket_config(self, ticket_config):
        assert isinstance(resolve(ticket_config, "x"), TicketResult)

    def test_unknown_config(self):
        with pytest.raises(TypeError):
            resolve({"rows": 3}, "x")


class TestTickets:
    """Ticket resolution."""

    def test_presentation_seed_is_first_draw(self, ticket_config):
        result = resolve_ticket(ticket_config, SEED_ABC123)
        # floor(0.17292318399995565 * 1_000_000)
        assert result.presentation_seed == 172923

    def test_deterministic(self, ticket_config):
        for i in range(20):
            seed = f"ticket:{i}"
            assert resolve_ticket(ticket_config, seed) == resolve_ticket(ticket_config, seed)

    def test_forced_tier(self, ticket_config):
        result = resolve_ticket(ticket_config, SEED_ABC123, forced_tier_id="jackpot")
        assert result.tier_id == "jackpot"
        assert result.is_win
        assert result.base_prize_cents == 10_000
        assert result.final_prize == Decimal("100.00")
        assert result.diagnostics == []

    def test_unknown_forced_tier_selects_normally(self, ticket_config):
        result = resolve_ticket(ticket_config, SEED_ABC123, forced_tier_id="missing")
        assert Diagnostic.FORCED_TIER_NOT_FOUND.value in result.diagnostics
        assert result.tier_id in {"jackpot", "big", "small", "lose"}

    def test_empty_prize_table(self):
        result = resolve_ticket(TicketConfig(), SEED_ABC123)
        assert result.tier_id == "default_lose"
        assert not result.is_win
        assert result.final_prize_cents == 0
        assert Diagnostic.EMPTY_PRIZE_TABLE.value in result.diagnostics

    def test_multiplier_applies_to_prize(self):
        config = create_winning_ticket(
            features=TicketFeatures(multipliers=MultiplierFeature(enabled=True, chance=1.0, values=[5])),
            ticket_price=Decimal("2"),
        )
        result = resolve_ticket(config, "mult")
        assert result.multiplier == 5
        assert result.base_prize_cents == 400
        assert result.final_prize_cents == 2000
        assert "multiplier" in result.features_triggered

    def test_second_chance_upgrade_gets_multiplier(self):
        config = create_losing_ticket(
            features=TicketFeatures(
                second_chance=ChanceFeature(enabled=True, chance=1.0),
                multipliers=MultiplierFeature(enabled=True, chance=1.0, values=[10]),
            ),
        )
        result = resolve_ticket(config, "upgrade")
        assert result.tier_id == "small"
        assert "second_chance" in result.features_triggered
        assert result.multiplier == 10
        # payout 2 x price 1 x 10
        assert result.final_prize_cents == 2000

    def test_losing_ticket_pays_nothing(self, ticket_config):
        result = resolve_ticket(ticket_config, SEED_ABC123, forced_tier_id="lose")
        assert not result.is_win
        assert result.final_prize_cents == 0
        assert result.multiplier == 1

    @pytest.mark.parametrize("category", list(TicketCategory))
    def test_reveal_map_fills_card(self, category):
        config = create_ticket_config(category, rows=3, cols=4)
        result = resolve_ticket(config, "card")
        assert len(result.reveal_map) == 12
