"""Response generation on top of the template catalog."""

from __future__ import annotations

import dataclasses
import logging

from .classifier import Category, ClassificationResult
from .templates import ResponseTemplate, TemplateCatalog

logger = logging.getLogger(__name__)


class ResponseGenerator:
    """Turn a classification into the reply the user will see."""

    def __init__(self, catalog: TemplateCatalog | None = None) -> None:
        self._catalog = catalog or TemplateCatalog()

    @property
    def catalog(self) -> TemplateCatalog:
        return self._catalog

    def respond(self, category: Category | ClassificationResult) -> ResponseTemplate:
        """Return a fresh copy of the canonical template for ``category``.

        Only crisis templates escalate.
        """

        if isinstance(category, ClassificationResult):
            category = Category(category.category)
        template = self._catalog.chat(category)
        if template.escalate:
            logger.warning("crisis template selected; response will escalate")
        return dataclasses.replace(template)

    def reflect(self, mood: str | None) -> ResponseTemplate:
        """Return the journal reflection for the declared ``mood`` tag."""

        return dataclasses.replace(self._catalog.reflection(mood))

    def welcome(self) -> ResponseTemplate:
        return dataclasses.replace(self._catalog.welcome)
