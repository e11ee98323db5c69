"""Ranking session orchestrating engine, persistence, CSV and input."""

from src.session.session import Progress, RankingSession


__all__ = ["Progress", "RankingSession"]
