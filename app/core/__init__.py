"""
Core Application - Infrastructure & Base Classes

Generic, reusable base classes shared by the domain apps (checkouts, orders).

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Managers (import from core.managers):
    - BaseQuerySet: Enhanced queryset with date-range helpers

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ConflictError: State conflicts (terminal records, lock contention)
    - ExternalServiceError: Third-party service failures
"""
