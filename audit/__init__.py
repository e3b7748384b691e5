"""
Field-level audit trail.

Every audited mutation is diffed against its previous state and written as
one immutable row per changed field, with the actor and the reason.
"""
