"""
Tests Module: Unit Tests

Test Coverage:
    - Error classification (direct and enveloped driver errors)
    - Outcome wrapping (FAIL/INFO by definiteness and idempotency)
    - Aggressive read retry policy thresholds
    - Pinned connections: open, close, await_open budget
    - Configuration and structured logging
"""
