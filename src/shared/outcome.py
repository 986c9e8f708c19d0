from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorCode(str, Enum):
    # Balance allocation
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_PERCENTAGE = "InvalidPercentage"
    MISSING_TARGET = "MissingTarget"
    # Quiz reward
    NO_QUESTIONS = "NoQuestions"
    INVALID_SCORE = "InvalidScore"
    # Transfer validation
    NON_POSITIVE_AMOUNT = "NonPositiveAmount"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    INVALID_TARGET = "InvalidTarget"
    # Collaborator
    REMOTE_FAILURE = "RemoteFailure"
    NOT_LOADED = "NotLoaded"
    MISSING_CREDENTIALS = "MissingCredentials"
    # Profile
    INVALID_PROFILE = "InvalidProfile"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """
    Terminal failure of a single user action.
    `message` is short and human-readable; it is what the UI shows.
    """

    code: ErrorCode
    message: str

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class PartialFailure(Failure, Generic[T]):
    """
    Failure after at least one remote write was already committed.
    `state` is what the caller should show instead of its previous state.
    """

    state: T | None = None


Outcome = Union[Success[T], Failure]
