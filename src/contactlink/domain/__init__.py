"""Domain layer for contactlink: identity records and reconciliation."""
