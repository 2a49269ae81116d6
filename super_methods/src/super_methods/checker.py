from super_methods.src.super_methods.context import PassContext
from super_methods.src.super_methods.hierarchy import HierarchyResolver
from super_methods.src.super_methods.logger import logger
from super_methods.src.super_methods.models.ast_models import (
    ForwardingCall, MethodDefinition, ParamKind, Return,
)
from super_methods.src.super_methods.models.jsdoc_models import AnnotationMap


def returns_value(definition: MethodDefinition, annotations: AnnotationMap) -> bool:
    if annotations.info(definition.statement).has_return or definition.function.returns_value:
        return True
    return any(isinstance(s, Return) and s.value is not None for s in definition.body)


class SoundnessChecker:
    """
    Decides whether a matched forwarding override can go. Every check answers
    "keep it" on anything it cannot prove, and says why at DEBUG level.
    """

    def __init__(self, resolver: HierarchyResolver, annotations: AnnotationMap,
                 context: PassContext):
        self.resolver = resolver
        self.annotations = annotations
        self.context = context

    def check(self, definition: MethodDefinition, forwarding: ForwardingCall) -> bool:
        info = self.annotations.info(definition.statement)
        where = f"{definition.owner}.prototype.{definition.name}"

        markers = info.markers & self.context.options.no_optimize_markers
        if markers:
            return self._reject(where, f"marked @{', @'.join(sorted(markers))}")
        if info.suppressions:
            return self._reject(where, f"@suppress {{{','.join(sorted(info.suppressions))}}}")
        if self.context.is_duplicated(definition.owner, definition.name):
            return self._reject(where, "defined more than once")

        parent = self.resolver.immediate_super(definition.owner)
        if parent is None:
            return self._reject(where, "no confirmed immediate superclass")
        if forwarding.via_super_class:
            if forwarding.receiver != definition.owner:
                return self._reject(where, f"superClass_ of {forwarding.receiver}")
            target = parent
        else:
            target = forwarding.receiver
        if target != parent:
            return self._reject(where, f"calls {target}, immediate superclass is {parent}")

        super_method = self.resolver.own_method(parent, definition.name)
        if super_method is None:
            return self._reject(where, f"{parent} has no single own definition")
        if not self._same_signature(definition, super_method):
            return self._reject(where, "parameters differ from the superclass method")
        if not forwarding.returned and returns_value(super_method, self.annotations):
            return self._reject(where, "drops the superclass method's return value")
        return True

    @staticmethod
    def _same_signature(override: MethodDefinition, super_method: MethodDefinition) -> bool:
        """
        Same length and kinds. An override parameter with nothing said about it
        (plain name, no @param) takes the optionality of the superclass
        parameter, as an undocumented @override inherits its parameter types.
        Variadics are never inherited: they change what must be forwarded.
        """
        if len(override.params) != len(super_method.params):
            return False
        for own, inherited in zip(override.params, super_method.params):
            if own.kind is inherited.kind:
                continue
            if (own.declared or own.kind is not ParamKind.REQUIRED
                    or inherited.kind is not ParamKind.OPTIONAL):
                return False
        return True

    @staticmethod
    def _reject(where: str, reason: str) -> bool:
        logger.debug(f"[RemoveSuperMethods] Keeping {where}: {reason}")
        return False
