"""
Advisor package entry point.

Expose the high-level recommend_actions function so application code can import
`advisor.recommend_actions` without reaching into the internals.
"""

from .core.recommender import ActionRecommender, recommend_actions

__all__ = ["ActionRecommender", "recommend_actions"]
