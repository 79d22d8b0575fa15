"""Coding standard resolution."""

from __future__ import annotations

from adapters.codacy_api import CodacyApi
from core.domain.models import CodingStandard


def resolve_standards(api: CodacyApi, standard_id: int = 0) -> list[CodingStandard]:
    """Standards to process, in the order the API returns them.

    `standard_id == 0` selects every standard of the organisation (one
    listing request); any other value fetches exactly that standard and
    raises `NotFoundError` when it does not exist. Errors are not retried.
    """

    if standard_id:
        return [api.get_coding_standard(standard_id)]
    return api.list_coding_standards()
