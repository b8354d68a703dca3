"""Field-consultant visit planning: weekly plans, route suggestions and draft generation."""
