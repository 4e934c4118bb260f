from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..config import HOLES_PER_ROUND, MAX_TEAM_SIZE, MIN_ROUND_PLAYERS, MIN_TEAM_SIZE
from ..schemas import ScoreEntry, Team

Scorecard = Mapping[Tuple[str, int], int]


class ValidationError(Exception):
    """Raised when submitted round setup or scores are invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def validate_round_setup(
    teams: Sequence[Team],
    *,
    min_players: int = MIN_ROUND_PLAYERS,
) -> None:
    """Validate the team roster of a round before it can start.

    Rules:
    - At least one team is required
    - Team ids and names must be unique within the round
    - Every team has between 2 and 3 golfers
    - No golfer appears twice, in the same team or across teams
    - At least ``min_players`` golfers take part in total
    - Even totals use only two-player teams; odd totals need at least one
      three-player team
    """

    if not teams:
        raise ValidationError("Team definitions are required.")

    seen_ids: set[str] = set()
    seen_names: set[str] = set()
    seen_golfers: set[str] = set()
    for team in teams:
        if team.id in seen_ids:
            raise ValidationError(f"Team id '{team.id}' is used more than once.")
        seen_ids.add(team.id)

        name_key = team.name.lower()
        if name_key in seen_names:
            raise ValidationError(f"Team name '{team.name}' is used more than once.")
        seen_names.add(name_key)

        size = len(team.golfer_ids)
        if not MIN_TEAM_SIZE <= size <= MAX_TEAM_SIZE:
            raise ValidationError(
                f"Team '{team.name}' has an invalid size ({size}). "
                f"Teams must have {MIN_TEAM_SIZE} or {MAX_TEAM_SIZE} players."
            )

        for golfer_id in team.golfer_ids:
            if golfer_id in seen_golfers:
                raise ValidationError(
                    f"Golfer '{golfer_id}' is assigned more than once. "
                    "Every golfer must be in exactly one team."
                )
            seen_golfers.add(golfer_id)

    total_players = len(seen_golfers)
    if total_players < min_players:
        raise ValidationError(
            f"A minimum of {min_players} golfers are required for a round "
            f"(got {total_players})."
        )

    three_player_teams = sum(1 for t in teams if len(t.golfer_ids) == 3)
    if total_players % 2 == 0:
        composition_ok = three_player_teams == 0
    else:
        composition_ok = three_player_teams >= 1
    if not composition_ok:
        raise ValidationError(
            "Team composition is incorrect for the number of players. For odd "
            "totals, use three-player teams as needed. For even totals, all "
            "teams should be two players."
        )

    return None


def validate_score_entries(
    entries: Sequence[ScoreEntry],
    team_ids: Iterable[str],
    *,
    holes: int = HOLES_PER_ROUND,
    max_score: int | None = 99,
) -> Dict[Tuple[str, int], int]:
    """Validate submitted hole scores and return them as a scorecard mapping.

    Rules:
    - At least one score entry is required
    - ``hole_number`` must be within ``1..holes``
    - ``score`` must be a positive integer (booleans are rejected)
    - Each ``(team, hole)`` pair may appear only once
    - Every ``team_id`` must belong to the round
    """

    if not entries:
        raise ValidationError("At least one score entry must be provided.")

    known_teams = set(team_ids)
    scorecard: Dict[Tuple[str, int], int] = {}
    for i, entry in enumerate(entries, start=1):
        if entry.team_id not in known_teams:
            raise ValidationError(
                f"Score #{i}: team '{entry.team_id}' is not a valid team for this round."
            )

        # bool is a subclass of int in Python
        if isinstance(entry.hole_number, bool) or isinstance(entry.score, bool):
            raise ValidationError(f"Score #{i} values must be integers (not booleans).")

        if not 1 <= entry.hole_number <= holes:
            raise ValidationError(
                f"Score #{i}: hole number must be between 1 and {holes}."
            )
        if entry.score <= 0:
            raise ValidationError(f"Score #{i}: score must be a positive value.")
        if max_score is not None and entry.score > max_score:
            raise ValidationError(f"Score #{i}: score must be <= {max_score}.")

        key = (entry.team_id, entry.hole_number)
        if key in scorecard:
            raise ValidationError(
                "Duplicate team/hole score entries found in the request "
                f"(team '{entry.team_id}', hole {entry.hole_number})."
            )
        scorecard[key] = entry.score

    return scorecard


def missing_scores(
    teams: Sequence[Team], scores: Scorecard, *, holes: int = HOLES_PER_ROUND
) -> List[Tuple[str, int]]:
    """Return ``(team_id, hole)`` pairs that have no score yet, hole by hole."""

    return [
        (team.id, hole)
        for hole in range(1, holes + 1)
        for team in teams
        if (team.id, hole) not in scores
    ]


def is_scorecard_complete(
    teams: Sequence[Team], scores: Scorecard, *, holes: int = HOLES_PER_ROUND
) -> bool:
    return bool(teams) and not missing_scores(teams, scores, holes=holes)
