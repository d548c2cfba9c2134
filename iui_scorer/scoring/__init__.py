"""
Scoring engine: turns one ``AttemptRecord`` into a ``ScoringResult``.

Modules
-------
rules          : Tier / FactorRule dataclasses, the fixed RULES table and the
                 aggregation constants — pure data, no control flow.
engine         : evaluate() + compute_overall_chance() +
                 assemble_recommendations() — pure functions, no I/O.
quick_estimate : estimate_success_probability() — coarse multiplicative
                 estimate that also reads comorbidities and medications.
"""

from iui_scorer.scoring.engine import evaluate, evaluate_many

__all__ = ["evaluate", "evaluate_many"]
