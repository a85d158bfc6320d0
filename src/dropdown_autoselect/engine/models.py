"""
Engine Models - Config, outcomes and run state for dropdown auto-selection.

SelectionConfig is built once per run from host form values and never
mutated. SelectionOutcome is the tagged result of one resolve+select
attempt; RunResult is the single terminal report of a run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING
import asyncio

from dropdown_autoselect.exceptions import ConfigurationError, NotConfiguredError

if TYPE_CHECKING:
    from dropdown_autoselect.exceptions import SelectionTimeoutError


DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000
DEFAULT_OBSERVER_TIMEOUT_MS = 10000
DEFAULT_SETTLE_DELAY_MS = 200

# Host forms use camelCase keys, settings use snake_case
_FORM_KEYS: Dict[str, tuple] = {
    "target_control_id": ("targetControl", "targetControlId", "target_control", "target_control_id"),
    "max_retries": ("maxRetries", "max_retries"),
    "retry_delay_ms": ("retryDelayMs", "retryDelay", "retry_delay_ms"),
    "observer_timeout_ms": ("observerTimeoutMs", "observerTimeout", "observer_timeout_ms"),
    "settle_delay_ms": ("settleDelayMs", "settle_delay_ms"),
    "await_custom_widget": ("awaitCustomWidget", "await_custom_widget"),
    "trigger_on_load": ("triggerOnLoad", "trigger_on_load"),
}

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _form_value(form: Mapping[str, Any], field_name: str) -> Any:
    for key in _FORM_KEYS[field_name]:
        if key in form and form[key] is not None:
            return form[key]
    return None


def parse_count(value: Any, default: int) -> int:
    """
    Parse a non-negative integer from a form value.

    Non-numeric, fractional or negative input falls back to the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value >= 0 else default
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def parse_flag(value: Any, default: bool) -> bool:
    """Parse a toggle value that may arrive as a bool or a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return default


@dataclass(frozen=True)
class SelectionConfig:
    """
    Immutable configuration for one auto-selection run.

    Attributes:
        target_control_id: Identifier of the control to operate on
        max_retries: Retries after the first attempt (0 = single attempt)
        retry_delay_ms: Delay between attempts
        observer_timeout_ms: Mutation-watch window after retries run out
        settle_delay_ms: Wait between opening a custom widget and picking
        await_custom_widget: Suspend the loop on the deferred widget check
        trigger_on_load: Hosts start a run as soon as config is available

    Example:
        >>> config = SelectionConfig.from_form({"targetControl": "region", "maxRetries": "x"})
        >>> config.max_retries
        3
    """
    target_control_id: str
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    observer_timeout_ms: int = DEFAULT_OBSERVER_TIMEOUT_MS
    settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS
    await_custom_widget: bool = True
    trigger_on_load: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.target_control_id, str) or not self.target_control_id.strip():
            raise NotConfiguredError()
        for name in ("max_retries", "retry_delay_ms", "observer_timeout_ms", "settle_delay_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(
                    f"{name} must be a non-negative integer", {name: value}
                )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "SelectionConfig":
        """
        Build a config from host form values (strings, numbers, toggles).

        Args:
            form: Raw values keyed by host (camelCase) or settings names

        Returns:
            Validated SelectionConfig

        Raises:
            NotConfiguredError: If the target control is missing or blank
        """
        target = _form_value(form, "target_control_id")
        if target is None or not str(target).strip():
            raise NotConfiguredError()

        return cls(
            target_control_id=str(target).strip(),
            max_retries=parse_count(_form_value(form, "max_retries"), DEFAULT_MAX_RETRIES),
            retry_delay_ms=parse_count(_form_value(form, "retry_delay_ms"), DEFAULT_RETRY_DELAY_MS),
            observer_timeout_ms=parse_count(
                _form_value(form, "observer_timeout_ms"), DEFAULT_OBSERVER_TIMEOUT_MS
            ),
            settle_delay_ms=parse_count(_form_value(form, "settle_delay_ms"), DEFAULT_SETTLE_DELAY_MS),
            await_custom_widget=parse_flag(_form_value(form, "await_custom_widget"), True),
            trigger_on_load=parse_flag(_form_value(form, "trigger_on_load"), True),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the host's camelCase keys."""
        return {
            "targetControlId": self.target_control_id,
            "maxRetries": self.max_retries,
            "retryDelayMs": self.retry_delay_ms,
            "observerTimeoutMs": self.observer_timeout_ms,
            "settleDelayMs": self.settle_delay_ms,
            "awaitCustomWidget": self.await_custom_widget,
            "triggerOnLoad": self.trigger_on_load,
        }


class SelectionVia(Enum):
    """Which selection protocol produced a success."""
    NATIVE_SELECT = "native-select"
    CUSTOM_WIDGET = "custom-widget"


class OutcomeKind(Enum):
    """Tag of a SelectionOutcome."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    OPENED_PENDING_OPTIONS = "opened_pending_options"


@dataclass
class SelectionOutcome:
    """
    Result of one resolve+select attempt.

    OPENED_PENDING_OPTIONS carries the deferred custom-widget check as a
    task; awaiting it yields a SUCCESS or NOT_FOUND outcome.
    """
    kind: OutcomeKind
    selected_label: Optional[str] = None
    via: Optional[SelectionVia] = None
    reason: Optional[str] = None
    pending: Optional["asyncio.Task[SelectionOutcome]"] = field(default=None, repr=False)

    @classmethod
    def success(cls, label: str, via: SelectionVia) -> "SelectionOutcome":
        return cls(kind=OutcomeKind.SUCCESS, selected_label=label, via=via)

    @classmethod
    def not_found(cls, reason: Optional[str] = None) -> "SelectionOutcome":
        return cls(kind=OutcomeKind.NOT_FOUND, reason=reason)

    @classmethod
    def opened_pending(cls, pending: "asyncio.Task[SelectionOutcome]") -> "SelectionOutcome":
        return cls(
            kind=OutcomeKind.OPENED_PENDING_OPTIONS,
            via=SelectionVia.CUSTOM_WIDGET,
            pending=pending,
        )

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def is_pending(self) -> bool:
        return self.kind == OutcomeKind.OPENED_PENDING_OPTIONS


class RunState(Enum):
    """Lifecycle state of a selection run."""
    SEARCHING = "searching"
    RETRY_WAITING = "retry_waiting"
    OBSERVING = "observing"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.SUCCEEDED, RunState.TIMED_OUT)


@dataclass
class RunResult:
    """
    Terminal report of a run, delivered exactly once.

    Attributes:
        state: SUCCEEDED or TIMED_OUT
        outcome: The successful (or pending, in fire-and-forget mode) outcome
        attempts: Number of resolver invocations made by the run
        error: Timeout error for TIMED_OUT runs
        cancelled: The run was torn down through the cancel hook
    """
    state: RunState
    outcome: Optional[SelectionOutcome] = None
    attempts: int = 0
    error: Optional["SelectionTimeoutError"] = None
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return self.state == RunState.SUCCEEDED

    @property
    def selected_label(self) -> Optional[str]:
        return self.outcome.selected_label if self.outcome else None
