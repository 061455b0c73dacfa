"""Deterministic round-outcome resolution for slot and scratch-ticket games."""

from slotmath.schemas import GameConfig, RoundResult, TicketConfig, TicketResult
from slotmath.services import (
    load_config,
    load_game_config,
    load_ticket_config,
    resolve,
    resolve_round,
    resolve_ticket,
    simulate_rounds,
    simulate_tickets,
)

__version__ = "0.1.0"

__all__ = [
    "GameConfig",
    "RoundResult",
    "TicketConfig",
    "TicketResult",
    "load_config",
    "load_game_config",
    "load_ticket_config",
    "resolve",
    "resolve_round",
    "resolve_ticket",
    "simulate_rounds",
    "simulate_tickets",
]
