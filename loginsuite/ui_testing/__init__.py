"""Browser-level UI testing: framework, page objects and scenarios."""
