"""HTTP blueprints for the account service."""
