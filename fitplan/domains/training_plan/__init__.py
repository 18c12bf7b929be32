"""Training plan generation domain.

Pipeline stages, leaf-first:
- schedule: weekly availability → concrete training days
- periodization: plan length → phase segments, deload cadence, intensity
- disciplines: goals → per-session discipline assignment
- composer: one session → workout with exercises and overload parameters
- generator: orchestrates the above and validates the result
"""
