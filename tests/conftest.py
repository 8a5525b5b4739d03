import os

from hypothesis import HealthCheck, settings

# CI profile: broad exploration of token sequences
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=200,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    print_blob=True,
)

# Quick, reproducible profile for mutation runs
settings.register_profile(
    "mutation",
    max_examples=30,
    deadline=100,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    derandomize=True,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
