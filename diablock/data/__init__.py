"""Static content tables: pydantic models and cached JSON loaders."""
