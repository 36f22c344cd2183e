"""Output layer: render ServiceResult as JSON, quiet text, or Rich text."""
