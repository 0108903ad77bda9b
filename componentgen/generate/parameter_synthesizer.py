"""
Turns a superclass chain into the `parameters` and `constructorArguments`
of a component.

Simple constructor parameters and parameters typed by a known component
become top-level parameters referenced by id. Parameters typed by a class
that an ancestor's constructor already takes are expressed as an argument
object extending the ancestor's argument. Any other class is treated as a
hash class whose fields are inlined.
"""
import logging
import re
from typing import List, Optional, Set, Tuple

from componentgen.base.types import (
    FieldDeclaration,
    FieldType,
    ParsedClassDeclaration,
    SuperClassChain,
    SuperClassChainElement,
)
from componentgen.extractors import ast_utils
from componentgen.extractors.import_export_reader import get_import_declarations
from componentgen.utils.file_utils import copy_context

logger = logging.getLogger(__name__)


def field_key_of(argument_id: str) -> str:
    return re.split(r"[#/:]", argument_id)[-1]


def pick_ancestor_argument(element: SuperClassChainElement, index: int) -> Optional[dict]:
    """
    The argument of an ancestor component that fills its constructor parameter at `index`.

    An argument whose `@id` ends in the parameter's key wins, then one ending in the key
    plus a numeric suffix that is not the key of another parameter. Otherwise the argument
    at the same position is used when the component lists one argument per parameter.
    """
    params = element.constructor_params
    key = params[index].key
    arguments = element.component.component.get("constructorArguments", [])
    segments = [field_key_of(a["@id"]) if isinstance(a, dict) and isinstance(a.get("@id"), str) else None
                for a in arguments]
    for argument, segment in zip(arguments, segments):
        if segment == key:
            return argument
    other_keys = {p.key for p in params}
    for argument, segment in zip(arguments, segments):
        if segment and segment not in other_keys and re.fullmatch(re.escape(key) + r"\d+", segment):
            return argument
    if len(arguments) == len(params):
        argument = arguments[index]
        if isinstance(argument, str):
            return {"@id": argument}
        if isinstance(argument, dict):
            return argument
    return None


class SynthesizerState:
    """Everything one synthesis run accumulates."""

    def __init__(self):
        self.chosen_ids: Set[str] = set()
        self.parameters: List[dict] = []
        self.contexts: List[str] = []

    def unique_field_id(self, prefix: str, field: str) -> str:
        i = 0
        while True:
            candidate = f"{prefix}#{field}{i if i else ''}"
            if candidate not in self.chosen_ids:
                self.chosen_ids.add(candidate)
                return candidate
            i += 1


class ParameterSynthesizer:
    def __init__(self, resolver, field_extractor, logger=logger):
        self.resolver = resolver
        self.field_extractor = field_extractor
        self.logger = logger

    def synthesize(self, chain: SuperClassChain, compact_path: str) -> dict:
        state = SynthesizerState()
        constructor_arguments = []
        for param in chain[0].constructor_params if chain else []:
            argument = self._argument(param, chain, compact_path, state, [], root=True)
            if argument is not None:
                constructor_arguments.append(argument)
        return {
            "contexts": state.contexts,
            "parameters": state.parameters,
            "constructorArguments": constructor_arguments,
        }

    def find_similar_param(self, declaration: ParsedClassDeclaration,
                           chain: SuperClassChain) -> Optional[Tuple[SuperClassChainElement, dict]]:
        """
        Searches the constructors of the ancestors for a parameter of the same class.
        Identity is the canonical declaration key; see pick_ancestor_argument for the argument.
        """
        for element in chain[1:]:
            if element.component is None:
                continue
            for index, other in enumerate(element.constructor_params):
                if other.kind != FieldType.COMPLEX or not declaration.same_class(other.declaration):
                    continue
                argument = pick_ancestor_argument(element, index)
                if argument is not None:
                    return element, argument
                self.logger.debug(f"Component {element.component.component.get('@id')} has no argument for field {other.key}")
        return None

    def _extends_id(self, argument: dict) -> Optional[str]:
        if "@id" in argument:
            return argument["@id"]
        if "extends" in argument:
            return argument["extends"]
        self.logger.error("Could not find @id nor extends!")
        return None

    def _hash_fields(self, declaration: ParsedClassDeclaration, chain, compact_path, state, stack) -> List[dict]:
        exported = []
        for field in self.field_extractor.extract_fields(declaration):
            value = self._argument(field, chain, compact_path, state, stack + [declaration.key])
            if value is None:
                continue
            # a lone reference collapses to the id itself
            if isinstance(value, dict) and list(value.keys()) == ["@id"]:
                value = value["@id"]
            exported.append({"keyRaw": field.key, "value": value})
        return exported

    def _superclass_of(self, declaration: ParsedClassDeclaration) -> Optional[ParsedClassDeclaration]:
        reference = ast_utils.get_super_class(declaration.node, declaration.source, self.logger)
        if reference is None:
            return None
        imports = get_import_declarations(declaration.source, self.logger)
        resolved = self.resolver.resolve_with_context(reference, declaration, imports)
        if not resolved:
            self.logger.error(f"Could not find superclass declaration {reference.class_name}")
            return None
        return resolved.value

    def _reference(self, param: FieldDeclaration, compact_path: str, state: SynthesizerState) -> dict:
        field_id = state.unique_field_id(compact_path, param.key)
        state.parameters.append({"@id": field_id, **param.metadata.to_json()})
        return {"@id": field_id}

    def _argument(self, param: FieldDeclaration, chain: SuperClassChain, compact_path: str,
                  state: SynthesizerState, stack: list, root: bool = False):
        if param.kind == FieldType.SIMPLE:
            return self._reference(param, compact_path, state)

        if param.declaration is None:
            return None
        if param.component is not None:
            copy_context(param.component.component_document, state.contexts)
            return self._reference(param, compact_path, state)
        if param.declaration.key in stack:
            self.logger.error(f"Field {param.key} recursively contains {param.declaration.class_name}, skipping")
            return None

        argument = {"@id": state.unique_field_id(compact_path, param.key)} if root else {}
        similar = self.find_similar_param(param.declaration, chain)
        if similar is not None:
            element, similar_argument = similar
            self.logger.debug(f"Found an identical constructor argument in other component for argument {param.key}")
            extends = self._extends_id(similar_argument)
            if extends:
                argument["extends"] = extends
            copy_context(element.component.component_document, state.contexts)
            return argument

        superclass = self._superclass_of(param.declaration)
        if superclass is not None:
            similar = self.find_similar_param(superclass, chain)
            if similar is not None:
                element, similar_argument = similar
                extends = self._extends_id(similar_argument)
                if extends:
                    argument["extends"] = extends
                argument["fields"] = self._hash_fields(param.declaration, chain, compact_path, state, stack)
                copy_context(element.component.component_document, state.contexts)
                return argument
            self.logger.debug(f"Could not find a matching argument for {superclass.class_name} in a superclass")

        # a hash class without any relevant ancestor
        exported = self._hash_fields(param.declaration, chain, compact_path, state, stack)
        if param.metadata.unique:
            argument["fields"] = exported
        else:
            argument["elements"] = exported
        return argument
