"""Domain-level policies and business rules.

Pure functions and value objects for the subscription and policy lifecycle:
access state, premium arrears and lapsing, and the claims workflow. Nothing in
this package touches a session; callers pass the current instant explicitly.
"""
