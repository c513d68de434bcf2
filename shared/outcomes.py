from enum import Enum
from dataclasses import dataclass
from typing import Optional, Any


class AdmissionErrorCode(str, Enum):
    # Validation rejections, deterministic for a given request
    NOT_APPROVED = "not_approved"
    MISSING_COLLEGE = "missing_college"
    EVENT_UNAVAILABLE = "event_unavailable"
    TEAM_SIZE_OUT_OF_RANGE = "team_size_out_of_range"
    ALREADY_REGISTERED = "already_registered"
    COLLEGE_LIMIT_REACHED = "college_limit_reached"

    # Infrastructure failures, safe to retry verbatim
    STORAGE_UNAVAILABLE = "storage_unavailable"


RETRYABLE_CODES = {AdmissionErrorCode.STORAGE_UNAVAILABLE}

DEFAULT_MESSAGES = {
    AdmissionErrorCode.NOT_APPROVED: "You must be APPROVED to register for events.",
    AdmissionErrorCode.MISSING_COLLEGE: "Your profile has no college assigned. Contact the organizing committee.",
    AdmissionErrorCode.EVENT_UNAVAILABLE: "This event is not open for registration.",
    AdmissionErrorCode.ALREADY_REGISTERED: "You have already registered for this event.",
    AdmissionErrorCode.COLLEGE_LIMIT_REACHED: "Your college has reached the registration limit for this event.",
    AdmissionErrorCode.STORAGE_UNAVAILABLE: "Registration could not be completed. Please try again.",
}


@dataclass
class AdmissionError:
    code: AdmissionErrorCode
    message: str = None
    min_team_size: Optional[int] = None
    max_team_size: Optional[int] = None

    def __post_init__(self):
        if self.message is None:
            if self.code == AdmissionErrorCode.TEAM_SIZE_OUT_OF_RANGE:
                self.message = (
                    f"Team size must be between {self.min_team_size} "
                    f"and {self.max_team_size}."
                )
            else:
                self.message = DEFAULT_MESSAGES.get(self.code, "Registration rejected.")

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES

    def to_dict(self) -> dict:
        data = {
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.code == AdmissionErrorCode.TEAM_SIZE_OUT_OF_RANGE:
            data["min_team_size"] = self.min_team_size
            data["max_team_size"] = self.max_team_size
        return data


@dataclass
class AdmissionResult:
    """Either an admitted registration or the reason it was refused."""
    registration: Any = None
    error: Optional[AdmissionError] = None

    @property
    def admitted(self) -> bool:
        return self.error is None and self.registration is not None

    @classmethod
    def admit(cls, registration) -> "AdmissionResult":
        return cls(registration=registration)

    @classmethod
    def reject(cls, code: AdmissionErrorCode, **kwargs) -> "AdmissionResult":
        return cls(error=AdmissionError(code, **kwargs))

    def to_dict(self) -> dict:
        if self.admitted:
            return {"admitted": True, "registration": self.registration.to_dict()}
        return {"admitted": False, "error": self.error.to_dict()}


def not_approved() -> AdmissionResult:
    return AdmissionResult.reject(AdmissionErrorCode.NOT_APPROVED)


def team_size_out_of_range(min_team_size: int, max_team_size: int) -> AdmissionResult:
    return AdmissionResult.reject(
        AdmissionErrorCode.TEAM_SIZE_OUT_OF_RANGE,
        min_team_size=min_team_size,
        max_team_size=max_team_size,
    )


def storage_unavailable() -> AdmissionResult:
    return AdmissionResult.reject(AdmissionErrorCode.STORAGE_UNAVAILABLE)
