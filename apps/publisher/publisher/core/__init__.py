"""Settings and logging shared by every publisher module."""
