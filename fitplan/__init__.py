"""fitplan - training plan generation and adaptation engine.

Subpackages:
- domains.training_plan: profile → multi-week plan (periodization, scheduling,
  discipline allocation, workout composition)
- plans: mutations applied to an existing plan (adaptation triggers, injury
  lifecycle, workout completion)
"""
