import logging
import os
from typing import Dict, Iterable, Optional

from componentgen.utils.file_utils import get_array, get_json

GEN_DELIMS = ("/", "#", ":", "?", "[", "]", "@")

logger = logging.getLogger(__name__)


class ContextCompactor:
    """
    Shortens IRIs to `prefix:suffix` using the terms of one or more JSON-LD context documents.
    """

    def __init__(self, documents: Iterable[dict] = (), logger=logger):
        self.logger = logger
        self.terms: Dict[str, dict] = {}
        for document in documents:
            for context in get_array(document, "@context"):
                if isinstance(context, str):
                    self.logger.debug(f"Skipping remote context {context}")
                    continue
                if isinstance(context, dict):
                    self._add_terms(context)

    @classmethod
    def from_manifest(cls, directory: str, manifest: dict, logger=logger):
        contexts = manifest.get("lsd:contexts") or {}
        documents = [get_json(os.path.join(directory, path)) for path in contexts.values()]
        return cls(documents, logger)

    def _add_terms(self, context: dict):
        for term, value in context.items():
            if term.startswith("@"):
                continue
            if isinstance(value, str):
                self.terms[term] = {"@id": value}
            elif isinstance(value, dict) and isinstance(value.get("@id"), str):
                self.terms[term] = value

    def expand(self, value: str) -> str:
        """Expands a compact `prefix:suffix` value when `prefix` is a known term."""
        prefix, sep, suffix = value.partition(":")
        if sep and not suffix.startswith("//") and prefix in self.terms:
            return self.terms[prefix]["@id"] + suffix
        return value

    def _prefix_value(self, term: str) -> Optional[str]:
        definition = self.terms[term]
        value = self.expand(definition["@id"])
        if definition.get("@prefix") is True or value.endswith(GEN_DELIMS):
            return value
        return None

    def compact_iri(self, iri: str) -> str:
        best = iri
        for term in self.terms:
            value = self._prefix_value(term)
            if not value or not iri.startswith(value) or iri == value:
                continue
            candidate = f"{term}:{iri[len(value):]}"
            if len(candidate) < len(best) or (len(candidate) == len(best) and candidate < best):
                best = candidate
        return best
