from .core import Season, Division, RoundType, Round, Team, Player
from .games import GameStatus, Game, GameLineup, GoalieGameStat
from .events import PenaltyType, GameEventBase, Goal, Penalty
from .standings import BonusPoints, Standing
from .stats import PlayerSeasonStat, GoalieSeasonStat

__all__ = [
    "Season", "Division", "RoundType", "Round", "Team", "Player",
    "GameStatus", "Game", "GameLineup", "GoalieGameStat",
    "PenaltyType", "GameEventBase", "Goal", "Penalty",
    "BonusPoints", "Standing",
    "PlayerSeasonStat", "GoalieSeasonStat",
]
