"""لایهٔ زیرساختی برای عملیات I/O، logging و CLI سیستم پذیرش."""

from admission.infra.errors import CandidateInputError, ConfigError, InfraError

__all__ = [
    "CandidateInputError",
    "ConfigError",
    "InfraError",
]
