"""Protocol definitions for staging storage."""

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from templatepub.publish.models import Artifact


@runtime_checkable
class StagingStoreProtocol(Protocol):
    """Staging location the validation service downloads archives from."""

    def template_dir(self, revision: str) -> str:
        """Key prefix (with trailing slash) for one source revision."""
        ...

    def upload(self, archives: Sequence[Path], revision: str) -> list["Artifact"]:
        """Upload archives and return the staged artifacts."""
        ...

    def delete(self, keys: Sequence[str]) -> None:
        """Remove staged keys."""
        ...
