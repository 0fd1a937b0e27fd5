# InsightHub: task list, usage stats, accounts, and heuristic text tools
#
# Components:
#   errors.py     - Error taxonomy mapped to HTTP status codes
#   schema.py     - Data model (Task, Stats, User, Document, StatKind)
#   config.py     - YAML-backed runtime configuration
#   store.py      - JSON file persistence, task and stats operations
#   auth.py       - Account registration and login
#   heuristics.py - Rule-based summarize / sentiment / task extraction / ideas
