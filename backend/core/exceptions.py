"""Domain errors raised by model and service code, turned into 400s by the views"""


class BusinessRuleError(Exception):
    """An operation that is well-formed but not allowed in the current state"""
    pass
