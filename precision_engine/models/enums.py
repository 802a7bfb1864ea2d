from enum import Enum

class DocumentKind(str, Enum):
    CAPABILITY = "capability"
    ENABLER = "enabler"
    FUNCTIONAL_REQUIREMENT = "functionalRequirement"
    NON_FUNCTIONAL_REQUIREMENT = "nonFunctionalRequirement"

class Priority(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

class Approval(str, Enum):
    APPROVED = "Approved"
    NOT_APPROVED = "NotApproved"

class FindingKind(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"

class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class FindingCategory(str, Enum):
    # Structure
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_ID_FORMAT = "INVALID_ID_FORMAT"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_PRIORITY = "INVALID_PRIORITY"
    # Content
    DESCRIPTION_TOO_SHORT = "DESCRIPTION_TOO_SHORT"
    DESCRIPTION_TOO_LONG = "DESCRIPTION_TOO_LONG"
    FORBIDDEN_WORD_DETECTED = "FORBIDDEN_WORD_DETECTED"
    MISSING_REQUIREMENT_FIELD = "MISSING_REQUIREMENT_FIELD"
    REQUIREMENT_NOT_TESTABLE = "REQUIREMENT_NOT_TESTABLE"
    NFR_NOT_MEASURABLE = "NFR_NOT_MEASURABLE"
    # Relationships
    INVALID_CAPABILITY_REFERENCE = "INVALID_CAPABILITY_REFERENCE"
    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"
    UNKNOWN_DEPENDENCY = "UNKNOWN_DEPENDENCY"
    # Quality gates
    MISSING_APPROVAL_FOR_IMPLEMENTATION = "MISSING_APPROVAL_FOR_IMPLEMENTATION"
    MISSING_NFR_SUGGESTIONS = "MISSING_NFR_SUGGESTIONS"
    MISSING_FUNCTIONAL_REQUIREMENTS = "MISSING_FUNCTIONAL_REQUIREMENTS"
    # Business logic
    CAPABILITY_WITHOUT_ENABLERS = "CAPABILITY_WITHOUT_ENABLERS"
    MISSING_IMPLEMENTATION_PLAN = "MISSING_IMPLEMENTATION_PLAN"
    MISSING_ACCEPTANCE_CRITERIA = "MISSING_ACCEPTANCE_CRITERIA"
    # Engine
    VALIDATION_ERROR = "VALIDATION_ERROR"

class CheckPhase(str, Enum):
    """Rule-checker families, in aggregation order."""
    STRUCTURE = "structure"
    CONTENT = "content"
    RELATIONSHIPS = "relationships"
    QUALITY_GATES = "quality_gates"
    BUSINESS_LOGIC = "business_logic"

class FixAction(str, Enum):
    ADD_FIELD = "ADD_FIELD"
    FORMAT_ID = "FORMAT_ID"
