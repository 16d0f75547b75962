"""Team formation engine.

Sub-modules:
- fit_scoring   – candidate-vs-team fit score
- team_balance  – strict / relaxed composition checks
- team_builder  – greedy allocation loop with rollback
"""
