"""Tools exposed to capabilities and to the manager."""
