"""Form catalog domain service.

Explicit introspection of the dynamic forms, used to find out which fields
carry the cadastral account and the period years.
"""

from typing import Optional

from cadsync.database.base import PointOfSaleSource
from cadsync.domain.entities import FormAnswer, FormField
from cadsync.domain.errors import NotFoundError, ValidationError, form_not_found

DEFAULT_SAMPLE_SIZE = 10


class FormCatalogService:
    """Service for inspecting dynamic form definitions and answers."""

    def __init__(self, pos: PointOfSaleSource):
        """Initialize form catalog service.

        Args:
            pos: Point-of-sale source
        """
        self.pos = pos

    def list_fields(self, form_id: Optional[int] = None) -> list[FormField]:
        """List declared fields, of one form or of every form.

        Raises:
            NotFoundError: If form_id is given and declares no fields
        """
        fields = self.pos.list_form_fields(form_id)
        if form_id is not None and not fields:
            raise NotFoundError(form_not_found(form_id))
        return fields

    def sample_answers(self, form_id: int, limit: int = DEFAULT_SAMPLE_SIZE) -> list[FormAnswer]:
        """Return up to limit non-empty answers given on a form.

        Raises:
            ValidationError: If limit is not positive
        """
        if limit <= 0:
            raise ValidationError(f"Sample size must be positive, got {limit}")
        return self.pos.list_form_answers_for_form(form_id, limit=limit, non_empty=True)
