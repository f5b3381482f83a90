"""Static grid configuration constants."""

DEFAULT_SEASON_GAMES = 82
QUALIFYING_GAMES_FRACTION = 0.58
LEADER_EPSILON = 1e-9

LEADER_KEYS: tuple[str, ...] = ("ppg", "rpg", "apg", "spg", "bpg")

CAREER_THRESHOLDS: dict[str, float] = {
    "pts": 20000,
    "trb": 10000,
    "ast": 5000,
    "stl": 2000,
    "blk": 1500,
    "tp": 2000,
}

SEASON_RATE_THRESHOLDS: dict[str, float] = {
    "ppg": 30.0,
    "apg": 10.0,
    "rpg": 15.0,
    "bpg": 3.0,
    "spg": 2.5,
}

# 50/40/90 needs real volume, otherwise a 10-attempt season can qualify.
SHOOTING_MIN_FGA = 300
SHOOTING_MIN_TPA = 82
SHOOTING_MIN_FTA = 125
SHOOTING_SPLITS = (0.50, 0.40, 0.90)

FEAT_POINTS = 50
FEAT_REBOUNDS = 20
FEAT_ASSISTS = 20
FEAT_THREES = 10
TRIPLE_DOUBLE_FLOOR = 10

LONG_CAREER_SEASONS = 15
ALL_STAR_VETERAN_AGE = 35

MIN_TEAM_PLAYERS = 10
MIN_ACHIEVEMENT_PLAYERS = 2
MIN_GRID_TEAMS = 3
PURE_TEAM_FALLBACK_TEAMS = 6
MAX_GRID_ATTEMPTS = 200

# (shape, probability). Shapes the current pool cannot fill are skipped and the
# remaining weights are renormalised by random.choices.
GRID_SHAPE_WEIGHTS: tuple[tuple[str, float], ...] = (
    ("pure_teams", 0.02),
    ("mixed", 0.23),
    ("team_achievements_by_teams", 0.25),
    ("teams_by_team_achievements", 0.25),
    ("heavy_achievements", 0.23),
    ("generic", 0.02),
)

ACCOLADE_WEIGHTS: dict[str, float] = {
    "mvp": 40,
    "finals_mvp": 25,
    "all_league_1": 12,
    "all_league_2": 8,
    "all_league_3": 6,
    "all_defensive_1": 6,
    "all_defensive_2": 4,
    "all_defensive_3": 3,
    "all_star": 6,
    "all_star_mvp": 5,
    "dpoy": 15,
    "roy": 8,
    "smoy": 8,
    "mip": 6,
    "semifinals_mvp": 8,
    "all_rookie": 2,
    "champion": 6,
}

# accolades, career value, rate talent, longevity
PROMINENCE_WEIGHTS = (0.45, 0.25, 0.20, 0.10)
MINUTES_SATURATION = 30000
RELIABILITY_GAMES = 246
RELIABILITY_SEASONS = 5
PER_BASELINE = 15.0
MIN_RARITY_RANGE = 1e-6
SINGLETON_RARITY = 50

RARITY_LABELS: tuple[tuple[int, str], ...] = (
    (80, "Ultra-rare"),
    (60, "Rare"),
    (40, "Notable"),
    (20, "Uncommon"),
    (0, "Common"),
)
