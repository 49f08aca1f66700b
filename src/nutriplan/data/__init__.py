"""Food catalog, category hierarchy and diet rules."""
