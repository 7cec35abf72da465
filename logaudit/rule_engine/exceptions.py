"""
Rule engine exceptions.

Only structural misconfiguration is raised. Anything that goes wrong while
reading a document ends up as findings on an outcome instead.
"""


class RuleEngineError(Exception):
    """Base class for rule engine errors."""


class StandardDefinitionError(RuleEngineError):
    """A standard or rule list is malformed (bad pattern, duplicate id, ...)."""

    def __init__(self, message: str, standard_id: str | None = None):
        self.standard_id = standard_id
        prefix = f"Standard '{standard_id}': " if standard_id else ""
        super().__init__(f"{prefix}{message}")


class StandardNotFoundError(RuleEngineError):
    """No standard is registered under the requested id."""

    def __init__(self, standard_id: str):
        self.standard_id = standard_id
        super().__init__(f"Standard '{standard_id}' not found")
