"""Skins evaluation: per-hole low-score prizes with tie rollover."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import reduce
from typing import Dict, Mapping, Sequence, Tuple

from ..config import HOLES_PER_ROUND
from ..exceptions import IncompleteScoresError
from ..money import ZERO, split_evenly, to_money
from ..schemas import HoleResult, SkinsResult, Team
from .validation import missing_scores

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _SkinsAccumulator:
    """State carried from one hole to the next."""

    rollover_count: int = 0
    hole_results: Tuple[HoleResult, ...] = ()
    team_winnings: Tuple[Tuple[str, Decimal], ...] = ()


def _evaluate_hole(
    acc: _SkinsAccumulator,
    hole: int,
    *,
    teams: Sequence[Team],
    scores: Mapping[Tuple[str, int], int],
    skin_value: Decimal,
) -> _SkinsAccumulator:
    hole_scores = [(team.id, scores[(team.id, hole)]) for team in teams]
    low_score = min(score for _, score in hole_scores)
    low_teams = [team_id for team_id, score in hole_scores if score == low_score]

    if len(low_teams) == 1:
        winner = low_teams[0]
        amount = to_money(skin_value * (1 + acc.rollover_count))
        result = HoleResult(
            hole_number=hole,
            low_score=low_score,
            winning_team_id=winner,
            rollover_count=acc.rollover_count,
            skin_value_won=amount,
            is_carry_over_win=acc.rollover_count > 0,
        )
        logger.debug("Hole %d: team %s wins %s", hole, winner, amount)
        return _SkinsAccumulator(
            rollover_count=0,
            hole_results=acc.hole_results + (result,),
            team_winnings=acc.team_winnings + ((winner, amount),),
        )

    result = HoleResult(
        hole_number=hole,
        low_score=low_score,
        tied_team_ids=low_teams,
        rollover_count=acc.rollover_count,
    )
    logger.debug("Hole %d: tied at %d by %s, skin rolls over", hole, low_score, low_teams)
    return _SkinsAccumulator(
        rollover_count=acc.rollover_count + 1,
        hole_results=acc.hole_results + (result,),
        team_winnings=acc.team_winnings,
    )


def evaluate_skins(
    teams: Sequence[Team],
    scores: Mapping[Tuple[str, int], int],
    skin_value_per_hole: Decimal,
    *,
    holes: int = HOLES_PER_ROUND,
) -> SkinsResult:
    """Award each hole's skin to the team with the sole lowest score.

    Holes are walked in ascending order. A tied low score pays nobody and the
    skin rolls over, so the next outright winner collects
    ``skin_value_per_hole * (1 + rollover_count)``. Skins still rolling after
    the last hole are reported as ``final_skin_rollover_amount`` and are not
    paid to anyone. Scores are raw strokes.

    Args:
        teams: Teams of the round in creation order.
        scores: Mapping of ``(team_id, hole_number)`` to strokes.
        skin_value_per_hole: The value frozen on the round at start.

    Raises:
        IncompleteScoresError: If any team is missing a score for any hole.
    """

    if not teams:
        raise ValueError("at least one team is required")
    missing = missing_scores(teams, scores, holes=holes)
    if missing:
        raise IncompleteScoresError(missing)

    skin_value = to_money(skin_value_per_hole)
    if skin_value <= 0:
        raise ValueError(f"skin value per hole must be positive (got {skin_value})")
    final = reduce(
        lambda acc, hole: _evaluate_hole(
            acc, hole, teams=teams, scores=scores, skin_value=skin_value
        ),
        range(1, holes + 1),
        _SkinsAccumulator(),
    )

    team_winnings: Dict[str, Decimal] = {team.id: ZERO for team in teams}
    for team_id, amount in final.team_winnings:
        team_winnings[team_id] += amount

    return SkinsResult(
        hole_results=list(final.hole_results),
        team_winnings=team_winnings,
        total_skins_paid=sum(team_winnings.values(), ZERO),
        final_rollover_count=final.rollover_count,
        final_skin_rollover_amount=to_money(skin_value * final.rollover_count),
    )


def split_team_winnings(
    teams: Sequence[Team], team_winnings: Mapping[str, Decimal]
) -> Dict[str, Decimal]:
    """Split each team's skins evenly among its golfers.

    Leftover cents go to the golfers listed first on the team. Every team
    must have at least one golfer, otherwise its skins would be lost.
    """

    shares: Dict[str, Decimal] = {}
    for team in teams:
        if not team.golfer_ids:
            raise ValueError(f"team '{team.id}' has no golfers to share its skins")
        amount = team_winnings.get(team.id, ZERO)
        for golfer_id, share in zip(
            team.golfer_ids, split_evenly(amount, len(team.golfer_ids))
        ):
            shares[golfer_id] = share
    return shares
