"""Declaring rules on classes and callables.

    @validation(full_mode=True)
    class SignupForm:
        username: Annotated[str, Validate("required")]
        password: Annotated[str, Validate("required", Rule("length", 6, 20))]
        address: Annotated[Address, Validate(is_model=True)]

    @validation()
    def change_email(user_id: int, email: Annotated[str, Validate("required", "email")]):
        ...
"""

from dataclasses import dataclass, field
from typing import Callable, TypeVar, Union

from fieldrules.validators.models import ValidateRule, Validation

POLICY_ATTR = "__validation__"

T = TypeVar("T")


@dataclass(frozen=True)
class Validate:
    """Rules for one field or parameter, placed in typing.Annotated metadata.

    Attributes:
        rules: Ordered rules; plain strings are shorthand for a rule without params
        name: Name the rules are registered under (defaults to the field/parameter name)
        is_model: The value is itself a validated shape. Without rules of its own,
            the nested shape's rules are merged in flat.
    """

    rules: tuple[ValidateRule, ...] = field(default=())
    name: str = ""
    is_model: bool = False

    def __init__(self, *rules: Union[str, ValidateRule], name: str = "", is_model: bool = False):
        object.__setattr__(
            self, "rules",
            tuple(r if isinstance(r, ValidateRule) else ValidateRule(name=r) for r in rules),
        )
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "is_model", is_model)


def validation(full_mode: bool = False) -> Callable[[T], T]:
    """Mark a class or callable as subject to validation.

    Args:
        full_mode: Collect a failure for every failing field instead of
            stopping at the first one
    """
    policy = Validation(full_mode=full_mode)

    def decorator(target: T) -> T:
        setattr(target, POLICY_ATTR, policy)
        return target

    return decorator


def get_policy(target: object) -> Union[Validation, None]:
    """Policy declared on target (inherited by subclasses), or None."""
    policy = getattr(target, POLICY_ATTR, None)
    return policy if isinstance(policy, Validation) else None
