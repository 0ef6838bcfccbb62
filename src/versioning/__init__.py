"""Version model and name/version token parsing."""
