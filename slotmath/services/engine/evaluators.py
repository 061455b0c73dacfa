"""Payout evaluator registry.

Each pay mechanism registers a builder that turns a config into a
``grid -> combinations`` function. Builders run once per round, so per-config
work (line tables, bet splitting) happens before the cascade loop.
"""

import logging
from collections.abc import Callable
from decimal import Decimal

from slotmath.schemas.game_config import GameConfig
from slotmath.schemas.round_result import Diagnostic, WinningCombination

from .cluster import evaluate_clusters
from .grid import Alphabet, Grid
from .lines import evaluate_lines, line_fits
from .paylines import default_lines
from .ways import evaluate_ways

logger = logging.getLogger(__name__)

# Type alias for a bound evaluator
Evaluate = Callable[[Grid], list[WinningCombination]]

# Type alias for evaluator builders
EvaluatorBuilder = Callable[[GameConfig, Alphabet, list[str]], Evaluate]

# Evaluator registry: maps mechanism kind to builder
_evaluators: dict[str, EvaluatorBuilder] = {}


def evaluator(kind: str) -> Callable[[EvaluatorBuilder], EvaluatorBuilder]:
    """Decorator to register the evaluator builder for a mechanism kind.

    Usage:
        @evaluator("lines")
        def build_lines(config, alphabet, diagnostics) -> Evaluate:
            ...
    """

    def decorator(func: EvaluatorBuilder) -> EvaluatorBuilder:
        if kind in _evaluators:
            logger.warning("Overwriting existing evaluator for %s", kind)
        _evaluators[kind] = func
        logger.debug("Registered evaluator for %s: %s", kind, func.__name__)
        return func

    return decorator


def registered_kinds() -> list[str]:
    return sorted(_evaluators)


def build_evaluator(config: GameConfig, alphabet: Alphabet, diagnostics: list[str]) -> Evaluate:
    """Bind the evaluator for ``config.mechanism``.

    Recoverable config anomalies found while binding are appended to
    ``diagnostics``.

    Raises:
        KeyError: If no evaluator is registered for the mechanism kind.
    """
    kind = config.mechanism.kind
    builder = _evaluators.get(kind)
    if builder is None:
        raise KeyError(f"No evaluator registered for mechanism kind: {kind}")
    return builder(config, alphabet, diagnostics)


@evaluator("lines")
def build_lines(config: GameConfig, alphabet: Alphabet, diagnostics: list[str]) -> Evaluate:
    lines = [list(line) for line in config.mechanism.lines]
    if not lines:
        lines = default_lines(config.rows, config.cols)
        diagnostics.append(Diagnostic.DEFAULT_LINES.value)
        logger.debug("No lines configured; using %d default lines", len(lines))

    skipped = [i for i, line in enumerate(lines, start=1) if not line_fits(line, config.rows, config.cols)]
    if skipped:
        diagnostics.append(Diagnostic.LINE_SKIPPED.value)
        logger.debug("Lines skipped for %dx%d grid: %s", config.rows, config.cols, skipped)

    # The bet is split across the whole table, skipped lines included
    bet_per_line = config.bet / len(lines) if lines else Decimal(0)

    def evaluate(grid: Grid) -> list[WinningCombination]:
        return evaluate_lines(
            grid,
            lines,
            bet_per_line,
            config.paytable,
            wilds=alphabet.wilds,
            scatters=alphabet.scatters,
        )

    return evaluate


@evaluator("ways")
def build_ways(config: GameConfig, alphabet: Alphabet, diagnostics: list[str]) -> Evaluate:
    def evaluate(grid: Grid) -> list[WinningCombination]:
        return evaluate_ways(
            grid,
            config.bet,
            config.paytable,
            wilds=alphabet.wilds,
            scatters=alphabet.scatters,
            bet_divisor=config.mechanism.bet_divisor,
        )

    return evaluate


@evaluator("cluster")
def build_cluster(config: GameConfig, alphabet: Alphabet, diagnostics: list[str]) -> Evaluate:
    def evaluate(grid: Grid) -> list[WinningCombination]:
        return evaluate_clusters(
            grid,
            config.mechanism.min_size,
            config.bet,
            config.paytable,
            scatters=alphabet.scatters,
            bet_divisor=config.mechanism.bet_divisor,
        )

    return evaluate
