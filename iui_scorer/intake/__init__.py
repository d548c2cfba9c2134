"""
Intake layer: parse raw attempt data and reject out-of-domain records before
they reach the scoring engine.

Modules:
  validation — load_attempt(), load_attempts_file(), validate_attempt(),
               require_valid(), DomainViolationError.
"""
