"""Round engine module - pure, deterministic outcome resolution.

This module provides the core engine with:
- A seeded PRNG threaded explicitly through every step
- Grid generation and cascade refills
- Line, ways and cluster evaluators registered per mechanism kind
- Prize-tier selection and scratch reveal strategies for tickets
- Load-time config validation with error codes

Usage:
    from slotmath.services.engine import resolve, validate_game_config

    validation = validate_game_config(config)
    if not validation.is_valid:
        print(f"Error: {validation.error_code} - {validation.error_message}")

    result = resolve(config, "abc123")
    payload = result.model_dump(mode="json")  # Hand to the presentation layer
"""

# PRNG
from .prng import SeededRNG, hash_seed

# Grid
from .grid import Alphabet, Grid, count_symbols, generate_grid

# Evaluators
from .cluster import evaluate_clusters, find_clusters
from .evaluators import Evaluate, build_evaluator, evaluator, registered_kinds
from .lines import evaluate_lines
from .paylines import STANDARD_LINES_5X3, default_lines, generate_paylines
from .paytable import Paytable, base_pay
from .ways import evaluate_ways

# Cascades
from .cascade import (
    CascadeOutcome,
    apply_gravity,
    refill_grid,
    remove_cells,
    run_cascade,
    winning_positions,
)

# Tickets
from .scratch import (
    RevealOutcome,
    random_positions,
    reveal,
    reveal_strategy,
    roll_multiplier,
    symbol_pools,
)
from .tiers import LOSING_TIER, normalized_probabilities, select_tier

# Main entry points
from .resolve import resolve, resolve_round, resolve_ticket

# Validation
from .validation import ValidationResult, validate_game_config, validate_ticket_config

__all__ = [
    # Main entry points
    "resolve",
    "resolve_round",
    "resolve_ticket",
    # Validation
    "ValidationResult",
    "validate_game_config",
    "validate_ticket_config",
    # PRNG
    "SeededRNG",
    "hash_seed",
    # Grid
    "Alphabet",
    "Grid",
    "count_symbols",
    "generate_grid",
    # Evaluators
    "Evaluate",
    "Paytable",
    "STANDARD_LINES_5X3",
    "base_pay",
    "build_evaluator",
    "default_lines",
    "evaluate_clusters",
    "evaluate_lines",
    "evaluate_ways",
    "evaluator",
    "find_clusters",
    "generate_paylines",
    "registered_kinds",
    # Cascades
    "CascadeOutcome",
    "apply_gravity",
    "refill_grid",
    "remove_cells",
    "run_cascade",
    "winning_positions",
    # Tickets
    "LOSING_TIER",
    "RevealOutcome",
    "normalized_probabilities",
    "random_positions",
    "reveal",
    "reveal_strategy",
    "roll_multiplier",
    "select_tier",
    "symbol_pools",
]
