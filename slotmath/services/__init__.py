"""Caller-facing services around the round engine."""

from .engine import resolve, resolve_round, resolve_ticket
from .game_setup import load_config, load_game_config, load_ticket_config
from .simulation import SimulationReport, simulate, simulate_rounds, simulate_tickets

__all__ = [
    "load_config",
    "load_game_config",
    "load_ticket_config",
    "resolve",
    "resolve_round",
    "resolve_ticket",
    "SimulationReport",
    "simulate",
    "simulate_rounds",
    "simulate_tickets",
]
