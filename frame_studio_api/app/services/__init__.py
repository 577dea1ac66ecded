"""
Service layer abstraction.

Each service encapsulates the logic of one concern (frame persistence,
preview storage, font loading) so that API handlers stay thin.
"""
