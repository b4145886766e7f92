# gully_backend/core/match_config.py
# House rules for 1v1 gully cricket. Tunables only, no logic.

# 🏏 Ball quotas (legal deliveries per innings)
MAX_LEGAL_BALLS_REGULAR = 12   # 2 overs
MAX_LEGAL_BALLS_SUPER = 6      # 1 over for every tie-breaker
BALLS_PER_OVER = 6

# Single-wicket format: the innings ends when the only batter is out
MAX_WICKETS = 1

# 📊 League points
POINTS_WIN = 2
POINTS_TIE = 1

# NRR: an innings that lost its wicket is credited with the full quota
NRR_ALL_OUT_BALLS = MAX_LEGAL_BALLS_REGULAR
NRR_DECIMALS = 3

# 🏆 Round-number ordinals (persisted "phase" contract)
QUALIFIER_1_ROUND = 91
QUALIFIER_2_ROUND = 92
FINAL_ROUND = 100
BOWL_OUT_ROUND = 101
TIE_BREAKER_BASE = 9000        # super overs / bowl-out variants live above this
SUPER_OVER_SUFFIX = 1
BOWL_OUT_SUFFIX = 2

# 💬 Result notes
MSG_CHASED = "Chased down successfully!"
MSG_DEFENDED = "Defended the target!"
MSG_TIE_LEAGUE = "Match Tied (1 pt each)"
MSG_TIE_FINAL = "Match Tied! (Super Over needed)"
MSG_TIE_DECIDER = "Bowl Out Needed!"
MSG_BOWL_OUT_WIN = "Won by Bowl Out"

NOTE_FINAL = "GRAND FINAL"
NOTE_BOWL_OUT = "Bowl Out Decider"
NOTE_SUPER_OVER = "SUPER OVER"

# Error banners surfaced to the scorer
ERR_SAVE_BALL = "Failed to save ball. Please check internet."
ERR_SECOND_INNINGS = "Failed to start 2nd innings"
ERR_UNDO = "Undo failed. Match reloaded from the database."
