"""
API version negotiation.

Clients declare the protocol version they speak in the ``api-version``
request header.  ``VersionGate.resolve`` turns that declaration into a
``VersionContext`` in one of three states:

* ``rejected`` – the version is not supported; ``resolve`` raises
  ``VersionUnsupported`` listing the supported versions,
* ``accepted-deprecated`` – the oldest supported version; responses are
  annotated with ``Deprecation``, ``Sunset`` and a ``Link`` to the
  successor interface,
* ``accepted-current`` – any other supported version.

The context is immutable and is computed once per request by the
version middleware.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from .config import DEFAULT_API_VERSION, DEFAULT_SUCCESSOR_LINK, DEFAULT_SUNSET, SUPPORTED_API_VERSIONS
from .errors import VersionUnsupported


logger = logging.getLogger(__name__)

VERSION_HEADER = "api-version"


class VersionState(str, enum.Enum):
    REJECTED = "rejected"
    ACCEPTED_CURRENT = "accepted-current"
    ACCEPTED_DEPRECATED = "accepted-deprecated"


@dataclass(frozen=True)
class VersionContext:
    """Resolved version of a single request/response exchange."""

    version: str
    state: VersionState
    sunset: Optional[str] = None
    successor_link: Optional[str] = None

    @property
    def deprecated(self) -> bool:
        return self.state is VersionState.ACCEPTED_DEPRECATED

    def response_headers(self) -> Dict[str, str]:
        """Headers to attach to the outgoing response."""
        headers = {VERSION_HEADER: self.version}
        if self.deprecated:
            headers["Deprecation"] = "true"
            if self.sunset:
                headers["Sunset"] = self.sunset
            if self.successor_link:
                headers["Link"] = self.successor_link
        return headers


def _version_key(version: str) -> Tuple[int, ...]:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError:
        raise ValueError(f"Malformed API version {version!r}") from None


class VersionGate:
    """Decide whether a declared version is usable and whether it is deprecated.

    Parameters
    ----------
    supported : Iterable[str]
        Supported version strings, e.g. ``("1.0", "1.1", "2.0")``.
    default : str
        Version assumed when the client declares none.
    sunset : str
        Retirement date announced for the deprecated version.
    successor_link : str
        ``Link`` header value pointing at the successor interface.
    """

    def __init__(
        self,
        supported: Iterable[str] = tuple(SUPPORTED_API_VERSIONS.split(",")),
        default: str = DEFAULT_API_VERSION,
        sunset: str = DEFAULT_SUNSET,
        successor_link: str = DEFAULT_SUCCESSOR_LINK,
    ) -> None:
        self.supported: Tuple[str, ...] = tuple(supported)
        if not self.supported:
            raise ValueError("At least one supported API version is required")
        if default not in self.supported:
            raise ValueError(f"Default API version {default!r} is not in the supported set")
        self.default = default
        self.sunset = sunset
        self.successor_link = successor_link
        self.deprecated_version = min(self.supported, key=_version_key)

    @classmethod
    def from_settings(cls, settings) -> "VersionGate":
        return cls(
            supported=settings.supported_versions,
            default=settings.default_api_version,
            sunset=settings.api_sunset,
            successor_link=settings.api_successor_link,
        )

    def resolve(self, declared: Optional[str]) -> VersionContext:
        """Resolve ``declared`` (``None`` or empty means the default)."""
        version = (declared or "").strip() or self.default
        if version not in self.supported:
            logger.warning("Rejected request declaring unsupported API version %r", version)
            raise VersionUnsupported(version, self.supported)
        if version == self.deprecated_version:
            return VersionContext(
                version=version,
                state=VersionState.ACCEPTED_DEPRECATED,
                sunset=self.sunset,
                successor_link=self.successor_link,
            )
        return VersionContext(version=version, state=VersionState.ACCEPTED_CURRENT)
