"""
FAGF error types.

The validator itself never raises for well-formed input; these exceptions
cover configuration loading and the caller-side session workflow.
"""


class GovernanceError(Exception):
    """Base error for all FAGF operations."""
    pass


# Configuration errors
class MandateConfigError(GovernanceError):
    """Mandate configuration is malformed or inconsistent."""
    pass


class DuplicateMandateIdError(MandateConfigError):
    """Two mandates in one configuration share an id."""
    def __init__(self, mandate_id: str):
        self.mandate_id = mandate_id
        super().__init__(f"Duplicate mandate id: {mandate_id}")


class UnknownMandateSlotError(MandateConfigError):
    """Configuration names a slot outside the fixed seven."""
    def __init__(self, slot: str):
        self.slot = slot
        super().__init__(f"Unknown mandate slot: {slot}")


# Session errors
class SessionError(GovernanceError):
    """Base error for governance session workflow issues."""
    pass


class ProposalNotFoundError(SessionError):
    """Proposal id is not waiting for a human decision."""
    pass


class HardBlockError(SessionError):
    """Hard-blocked proposals cannot be escalated or overridden."""
    def __init__(self, proposal_id: str, reason: str):
        self.proposal_id = proposal_id
        super().__init__(f"Proposal {proposal_id} is hard blocked: {reason}")


class NoPendingConfigError(SessionError):
    """Deploy requested with no staged configuration."""
    pass
