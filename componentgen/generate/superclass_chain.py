import logging

from componentgen.base.types import ImportTable, ParsedClassDeclaration, SuperClassChain, SuperClassChainElement
from componentgen.extractors import ast_utils
from componentgen.extractors.import_export_reader import get_import_declarations

logger = logging.getLogger(__name__)


class SuperClassChainBuilder:
    def __init__(self, resolver, field_extractor, lookup, logger=logger):
        self.resolver = resolver
        self.field_extractor = field_extractor
        self.lookup = lookup
        self.logger = logger

    def build_chain(self, start: ParsedClassDeclaration, imports: ImportTable) -> SuperClassChain:
        """
        Walks from a class to its superclass, that class' superclass and so forth.
        Element 0 is the class itself and never carries a component.
        """
        chain: SuperClassChain = []
        current = start
        current_imports = imports
        seen = set()
        while current is not None:
            seen.add(current.key)
            params = self.field_extractor.extract_constructor_params(current, current_imports)
            component = None
            if chain:
                component = self.lookup.match_component(current)
                if component is None:
                    self.logger.error(f"Did not find a component for superclass {current.class_name}")
            chain.append(SuperClassChainElement(current, component, params))

            reference = ast_utils.get_super_class(current.node, current.source, self.logger)
            if reference is None:
                break
            resolved = self.resolver.resolve_with_context(reference, current, current_imports)
            if not resolved:
                self.logger.error(f"Could not find declaration of superclass {reference.class_name}")
                break
            if resolved.value.key in seen:
                self.logger.error(f"Circular inheritance detected at {reference.class_name}")
                break
            current = resolved.value
            current_imports = get_import_declarations(current.source, self.logger)
        return chain
