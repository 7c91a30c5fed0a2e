"""Route modules. Import order in stash.api.router decides match precedence."""
