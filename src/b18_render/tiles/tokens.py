"""
Module: tiles.tokens

Purpose:
    Board18 token trays. Every company gets one station token entry in the
    "btok" tray and one market token entry in the "mtok" tray; extra tokens
    declared by the game go into "btok" only.

Key Functions:
    - kept_extra_tokens(): Extra tokens after dropping quantity 0
    - build_token_trays(): (btok, mtok) tray dicts
    - token_sheet_height(): Token sheet capture height

Dependencies:
    - core.models: GameSpec, duplicate_count

Used By:
    - output.manifest: Token trays
    - render.jobs: Token viewport
"""

from __future__ import annotations

from typing import Any, Mapping

from b18_render.core.models import GameSpec, duplicate_count


TOKEN_CELL = 30


def company_token_count(company: Mapping[str, Any]) -> int:
    """Station tokens printed for a company; `tokens` may be a list or a count."""
    tokens = company.get("tokens") or ()
    if isinstance(tokens, int):
        return tokens
    return len(tokens)


def kept_extra_tokens(game: GameSpec) -> list[Any]:
    """
    Extra tokens that appear on the sheet.

    A quantity of exactly 0 removes the token.
    """
    kept = []
    for token in game.tokens:
        quantity = token.get("quantity") if isinstance(token, Mapping) else None
        if quantity == 0 and not isinstance(quantity, bool):
            continue
        kept.append(token)
    return kept


def build_token_trays(game: GameSpec, token_cell: int = TOKEN_CELL) -> tuple[dict, dict]:
    """
    Build the btok (station) and mtok (market) trays.

    Both trays are always returned, empty when the game has no companies
    and no extra tokens.

    Returns:
        Tuple of (btok, mtok)
    """
    base = {
        "tName": "Tokens",
        "imgLoc": f"images/{game.id}/Tokens.png",
        "xStart": 0,
        "xSize": token_cell,
        "xStep": token_cell,
        "yStart": 0,
        "ySize": token_cell,
        "yStep": token_cell,
    }
    btok = {"type": "btok", **base, "token": []}
    mtok = {"type": "mtok", **base, "token": []}

    for company in game.companies:
        btok["token"].append({
            "dups": company_token_count(company) + game.extra_station_tokens,
            "flip": True,
        })
        mtok["token"].append({"flip": True})

    for token in kept_extra_tokens(game):
        quantity = token.get("quantity") if isinstance(token, Mapping) else None
        btok["token"].append({"dups": duplicate_count(quantity), "flip": True})

    return btok, mtok


def token_sheet_height(game: GameSpec, token_cell: int = TOKEN_CELL) -> int:
    """One token row per company and per kept extra token."""
    return token_cell * (len(game.companies) + len(kept_extra_tokens(game)))
