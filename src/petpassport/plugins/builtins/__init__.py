"""Built-in plugins shipped with petpassport."""
