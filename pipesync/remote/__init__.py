"""Remote: transport adapters for the fleet-management pipeline service."""
