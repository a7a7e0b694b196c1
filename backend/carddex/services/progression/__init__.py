"""
Progression rules engine: badge catalog, threshold evaluation, award
ledger, progress projection and the streak/grace-day calendar.

Import from the submodules directly; ProgressionEngine lives in
carddex.services.progression.engine.
"""
