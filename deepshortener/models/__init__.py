from deepshortener.models.link_model import LinkModel, UserType
from deepshortener.models.link_policy_model import LinkPolicy
from deepshortener.models.redirect_decision_model import RedirectDecision, RedirectKind


__all__ = [
    'LinkModel',
    'UserType',
    'LinkPolicy',
    'RedirectDecision',
    'RedirectKind',
]
