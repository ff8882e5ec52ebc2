"""
macOS acquisition strategy.

opam comes from Homebrew, unpinned. There is no cache integration; every run
initializes opam from scratch.
"""

from opamkit.provision.strategy import (
    AcquisitionStrategy,
    ProvisionOutcome,
    ProvisionRequest,
    ProvisionResult,
    UNIX_INSTALL_SCRIPT,
    UPSTREAM_REPOSITORY,
)


class DarwinStrategy(AcquisitionStrategy):
    """Strategy for macOS runners."""

    name = "darwin"

    def acquire(self, request: ProvisionRequest) -> ProvisionResult:
        ctx = self.context
        repository = request.resolve_repository(UPSTREAM_REPOSITORY)

        ctx.runner.run(["brew", "install", "opam"])
        ctx.runner.run(["opam", "init", "-yav", repository])
        ctx.runner.run([ctx.script(UNIX_INSTALL_SCRIPT), request.ocaml_version])
        ctx.runner.run(["opam", "install", "-y", "depext"])

        return self._result(ProvisionOutcome.COLD_INITIALIZED)
