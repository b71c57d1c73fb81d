"""Scoreboard domain services: roster, ranking, persistence and session.

Nothing in here imports Flask. HTTP routes call into SessionController,
keeping transport concerns separated from the scoring rules.
"""
