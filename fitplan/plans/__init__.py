"""Plans module - mutations applied to an existing training plan.

This module provides:
- Adaptation triggers (missed workouts, intensity, schedule, injury, timeline)
- Injury lifecycle hooks that re-trigger adaptation
- Workout completion transitions
"""
