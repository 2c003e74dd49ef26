"""Process-wide confirmation dialog channel backed by the global store."""

from collections.abc import Callable
from dataclasses import dataclass

from nutrition_admin.client.store import Store

DEFAULT_TITLE = "Confirmation Required"
DEFAULT_DESCRIPTION = "Are you sure you want to perform this action?"
DEFAULT_CONFIRM_LABEL = "Continue"
DEFAULT_CANCEL_LABEL = "Cancel"


@dataclass(frozen=True)
class AlertConfig:
    """One-shot payload describing a pending confirmation."""

    title: str | None = None
    description: str | None = None
    confirm_label: str | None = None
    cancel_label: str | None = None
    on_confirm: Callable[[], object] | None = None
    on_cancel: Callable[[], object] | None = None

    def __deepcopy__(self, memo: dict) -> "AlertConfig":
        return self


@dataclass(frozen=True)
class RenderedAlert:
    """Texts shown by the confirmation dialog."""

    open: bool
    title: str
    description: str
    confirm_label: str
    cancel_label: str


@dataclass
class ConfirmationChannel:
    """Request confirmations from anywhere; the last request wins."""

    store: Store

    def request(self, config: AlertConfig) -> None:
        """Open the dialog with the given config, replacing any pending one."""
        self.store.get_state()["show_alert"](config)


@dataclass
class AlertDialogRenderer:
    """The single consumer of the global alert store."""

    store: Store

    @property
    def config(self) -> AlertConfig | None:
        return self.store.get_state()["alert_config"]

    def render(self) -> RenderedAlert | None:
        """Return the dialog texts, or None when nothing is pending."""
        state = self.store.get_state()
        config: AlertConfig | None = state["alert_config"]
        if config is None:
            return None
        return RenderedAlert(
            open=bool(state["alert_open"]),
            title=config.title or DEFAULT_TITLE,
            description=config.description or DEFAULT_DESCRIPTION,
            confirm_label=config.confirm_label or DEFAULT_CONFIRM_LABEL,
            cancel_label=config.cancel_label or DEFAULT_CANCEL_LABEL,
        )

    def confirm(self) -> None:
        """Run the pending confirm callback and close the dialog."""
        config = self.config
        try:
            if config is not None and config.on_confirm is not None:
                config.on_confirm()
        finally:
            self._close()

    def cancel(self) -> None:
        """Run the pending cancel callback and close the dialog."""
        config = self.config
        try:
            if config is not None and config.on_cancel is not None:
                config.on_cancel()
        finally:
            self._close()

    def dismiss(self) -> None:
        """Close the dialog from outside its buttons; treated as cancel."""
        self.cancel()

    def _close(self) -> None:
        self.store.get_state()["update_alert_open"](False)
