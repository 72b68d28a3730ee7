"""Infrastructure - provider adapters and file stores."""
