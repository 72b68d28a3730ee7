"""
Command processor for watchlist/portfolio edits.

Grammar (whitespace separated, first token is the verb):

    add <name> [-w] [-p <owned> <avg_buy_price>] [-wp <owned> <avg_buy_price>]
    rm  <name> [-w] [-p] [-wp]

`-pw` is accepted wherever `-wp` is. Parsing and applying are separate steps:
parse_command() validates the whole line before anything is touched, so an
invalid flag never leaves a half-applied mutation behind.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Union

from ...models.portfolio import PortfolioConfig, TokenEntry
from ...utils.logging_setup import get_logger
from ...utils.result import Err, Ok, Result

logger = get_logger(__name__)

ADD_USAGE = "Usage: add <name> [-w|-p] [amount] [price]"
RM_USAGE = "Usage: rm <name> [-w|-p|-wp]"
UNKNOWN_COMMAND = "Unknown command. Available commands: add, rm"
EMPTY_COMMAND = "Empty command"
INVALID_FLAG = "Invalid flag"

_BOTH_FLAGS = ("-wp", "-pw")


@dataclass(frozen=True)
class AddCommand:
    name: str
    watchlist: bool
    portfolio: bool
    owned: Optional[float] = None
    avg_buy_price: Optional[float] = None


@dataclass(frozen=True)
class RemoveCommand:
    name: str
    watchlist: bool
    portfolio: bool


Command = Union[AddCommand, RemoveCommand]


def _parse_amount(token: str) -> Optional[float]:
    """Non-negative finite float, or None when the token is not one."""
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _parse_add(parts: List[str]) -> Result[Command, str]:
    if len(parts) < 2:
        return Err(ADD_USAGE)

    name = parts[1]
    watchlist = False
    portfolio = False
    owned: Optional[float] = None
    avg_buy_price: Optional[float] = None

    i = 2
    while i < len(parts):
        flag = parts[i]
        if flag == "-w":
            watchlist = True
        elif flag == "-p" or flag in _BOTH_FLAGS:
            portfolio = True
            if flag in _BOTH_FLAGS:
                watchlist = True
            # Amounts are taken only when both tokens are present. With
            # fewer, the flag still applies and the amounts stay unset.
            if i + 2 < len(parts):
                owned = _parse_amount(parts[i + 1])
                avg_buy_price = _parse_amount(parts[i + 2])
                i += 2
        else:
            return Err(INVALID_FLAG)
        i += 1

    if not watchlist and not portfolio:
        watchlist = True

    return Ok(AddCommand(
        name=name,
        watchlist=watchlist,
        portfolio=portfolio,
        owned=owned,
        avg_buy_price=avg_buy_price,
    ))


def _parse_remove(parts: List[str]) -> Result[Command, str]:
    if len(parts) < 2:
        return Err(RM_USAGE)

    name = parts[1]
    watchlist = False
    portfolio = False

    for flag in parts[2:]:
        if flag == "-w":
            watchlist = True
        elif flag == "-p":
            portfolio = True
        elif flag in _BOTH_FLAGS:
            watchlist = True
            portfolio = True
        else:
            return Err(INVALID_FLAG)

    if not watchlist and not portfolio:
        watchlist = True
        portfolio = True

    return Ok(RemoveCommand(name=name, watchlist=watchlist, portfolio=portfolio))


def parse_command(text: str) -> Result[Command, str]:
    """Parse one command line into a Command or a user-facing error message."""
    parts = text.split()
    if not parts:
        return Err(EMPTY_COMMAND)

    verb = parts[0]
    if verb == "add":
        return _parse_add(parts)
    if verb == "rm":
        return _parse_remove(parts)
    return Err(UNKNOWN_COMMAND)


def apply_command(config: PortfolioConfig, command: Command) -> None:
    """
    Apply a parsed command to the portfolio configuration in place.

    `add` updates a case-insensitive match or appends a new entry. `rm`
    clears the requested memberships (holdings go with portfolio
    membership). Entries left in neither list are dropped afterwards.
    """
    token = config.find(command.name)

    if isinstance(command, AddCommand):
        if token is None:
            config.tokens.append(TokenEntry(
                name=command.name,
                owned=command.owned,
                avg_buy_price=command.avg_buy_price,
                in_watchlist=command.watchlist,
                in_portfolio=command.portfolio,
            ))
            logger.info(f"Added token {command.name}")
        else:
            if command.watchlist:
                token.in_watchlist = True
            if command.portfolio:
                token.in_portfolio = True
                if command.owned is not None:
                    token.owned = command.owned
                if command.avg_buy_price is not None:
                    token.avg_buy_price = command.avg_buy_price
            logger.info(f"Updated token {token.name}")
    else:
        if token is not None:
            if command.watchlist:
                token.in_watchlist = False
            if command.portfolio:
                token.in_portfolio = False
                token.owned = None
                token.avg_buy_price = None
            logger.info(
                f"Removed {token.name} (watchlist={command.watchlist}, "
                f"portfolio={command.portfolio})"
            )

    removed = config.prune()
    if removed:
        logger.info(f"Dropped {removed} token(s) no longer watched or held")
