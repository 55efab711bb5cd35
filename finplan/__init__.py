"""
Financial Planning Engine - Source Package

Deterministic calculation engine for a personal-finance planning backend.
Turns raw transaction, category, goal and profile snapshots into budget
summaries, scenario evaluations, projections and goal-progress views.

DESIGN PRINCIPLES:
1. Calculators are pure functions over supplied snapshots
2. Degenerate numbers resolve to sentinels, never to exceptions
3. Bad caller input fails early and visibly
4. Cached results are advisory, never authoritative
5. Storage and cache backends are swappable
"""

__version__ = "1.0.0"
__author__ = "Financial Planning Team"
