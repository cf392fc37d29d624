"""Application layer: presence tracking and synchronization use cases."""
