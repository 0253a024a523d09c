"""HTTP surface: routes, request/response models, dependencies, error handlers."""
