"""Infrastructure layer — operational concerns for the spectrogram pipeline.

Modules:
    metrics     Prometheus metrics registry (optional prometheus_client).
"""
