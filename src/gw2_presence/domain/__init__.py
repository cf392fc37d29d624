"""Domain layer for GW2 presence."""
