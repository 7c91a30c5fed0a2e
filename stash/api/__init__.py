"""HTTP surface: routes and dependencies."""
