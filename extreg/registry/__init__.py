"""Registry — the public catalog of approved extensions.

Entries are created exactly once, by approving a pending submission, and
share that submission's id.
"""
