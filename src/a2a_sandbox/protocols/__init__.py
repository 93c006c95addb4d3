"""Protocol implementations for the A2A sandbox."""
