"""Property tests for field set resolution."""
