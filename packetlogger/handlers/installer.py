"""Best-effort installation of the handler table into the host.

A row the host rejects is reported and skipped; the remaining rows still
install.  Every row's name is recorded as hooked whether or not its
installation succeeded, so the "only hooked packets" filter reflects the
intended handler set.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field

from packetlogger.core.registry import HookedNameRegistry
from packetlogger.handlers.base import HandlerSpec
from packetlogger.host import HookOptions, ProtocolHost

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[HandlerSpec], Callable[..., object]]


class HandlerInstallError(RuntimeError):
    """Raised by ``install_one`` when building or hooking a handler fails."""

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"Could not hook {name}: {cause}")
        self.name = name
        self.cause = cause


class InstallFailure(BaseModel):
    """A handler that could not be installed."""

    model_config = ConfigDict(frozen=True)

    name: str
    error: str


class InstallReport(BaseModel):
    """Outcome of one installation pass."""

    installed: list[str] = Field(default_factory=list)
    failures: list[InstallFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class HandlerInstaller:
    """Installs handler specs into a host and records their names.

    Parameters
    ----------
    host:
        The interception host.
    hooked:
        Registry receiving every installed (or attempted) name.
    order:
        Hook chain position for dedicated handlers.
    """

    def __init__(
        self, host: ProtocolHost, hooked: HookedNameRegistry, *, order: int = 1000
    ) -> None:
        self._host = host
        self._hooked = hooked
        self._options = HookOptions(order=order, fake=None)

    def resolve_version(self, spec: HandlerSpec) -> int:
        """Pinned version, else the host's preferred one, else the fallback."""
        if spec.version is not None:
            return spec.version
        return self._host.protocol_version(spec.name) or spec.fallback_version

    def install_one(self, spec: HandlerSpec, factory: HandlerFactory) -> object:
        """Build and hook the handler for a single spec; returns the host's subscription.

        The name is recorded as hooked before anything else is attempted.

        Raises
        ------
        HandlerInstallError
            If building the handler, resolving the version or registering
            the hook failed.
        """
        self._hooked.register(spec.name)
        try:
            callback = factory(spec)
            version = self.resolve_version(spec)
            return self._host.hook(spec.name, version, self._options, callback)
        except Exception as exc:  # noqa: BLE001
            raise HandlerInstallError(spec.name, exc) from exc

    def install(self, specs: Iterable[HandlerSpec], factory: HandlerFactory) -> InstallReport:
        """Install every spec, collecting failures instead of stopping."""
        report = InstallReport()
        for spec in specs:
            try:
                self.install_one(spec, factory)
            except HandlerInstallError as exc:
                logger.warning("%s", exc)
                report.failures.append(InstallFailure(name=spec.name, error=str(exc.cause)))
            else:
                report.installed.append(spec.name)

        if report.failures:
            logger.warning(
                "%d of %d handlers failed to install: %s",
                len(report.failures),
                len(report.failures) + len(report.installed),
                ", ".join(f.name for f in report.failures),
            )
        return report
