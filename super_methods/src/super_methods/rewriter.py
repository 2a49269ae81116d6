from super_methods.src.super_methods.logger import logger
from super_methods.src.super_methods.models.ast_models import MethodDefinition


def remove_definition(definition: MethodDefinition) -> bool:
    """
    Deletes the definition's statement from its script. Nothing else in the
    tree is touched. Returns False when the statement is already gone.
    """
    statements = definition.script.statements
    for index, statement in enumerate(statements):
        if statement is definition.statement:
            del statements[index]
            logger.info(
                f"[RemoveSuperMethods] Removed {definition.owner}.prototype.{definition.name}"
                f" ({definition.script.source_name})"
            )
            return True
    return False
