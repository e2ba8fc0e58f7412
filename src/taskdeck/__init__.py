"""Personal task list manager."""
