"""Exception hierarchy for the candidate matching service."""


class SkillveeError(Exception):
    """Base exception for all errors raised by the service layer."""


class ConfigurationError(SkillveeError):
    """Raised when static configuration (tables, settings) is inconsistent."""


class StoreError(SkillveeError):
    """Raised when the database reports an error for a write."""


class AssessmentNotFoundError(SkillveeError):
    """Raised when one or more requested assessments do not exist.

    Attributes:
        missing_ids -- the assessment ids that could not be found
    """

    def __init__(self, missing_ids: list[str]):
        self.missing_ids = missing_ids
        super().__init__(f"Assessments not found: {', '.join(missing_ids)}")
