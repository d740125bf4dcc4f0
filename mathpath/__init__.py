"""
MathPath - adaptive arithmetic practice engine.

Components:
- curriculum: Static skill graph (sections of skills with prerequisites)
- exercises: Constraint-based problem generator, exercise kinds, answer evaluator
- session: Ten-slot lesson planning and lesson state
- progression: Mastery levels, skill unlocking, streaks
- db: Reference storage backends for profiles and progress
"""

__version__ = "1.0.0"
