"""Adapters connecting the presence core to the outside world."""
