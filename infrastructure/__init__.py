"""Infrastructure layer — operational concerns for the shakuhachi workshop service.

Modules:
    metrics     Prometheus metrics registry and recording helpers.
"""
