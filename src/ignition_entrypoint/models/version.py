"""Gateway version triplets and the image/volume comparison."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

VERSION_PATTERN = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")


class Version(BaseModel):
    """A strict ``major.minor.patch`` version."""

    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    patch: int = Field(ge=0)

    @classmethod
    def parse(cls, text: str) -> Version | None:
        """Parse ``N.N.N``; anything else is a parse failure, not a zero version."""
        match = VERSION_PATTERN.match(text.strip())
        if match is None:
            return None
        major, minor, patch = (int(g) for g in match.groups())
        return cls(major=major, minor=minor, patch=patch)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class VersionComparison(Enum):
    """Relationship of the image version to the version recorded on the volume.

    Values are the legacy numeric codes printed by ``compare-versions``.
    """

    EQUAL = 0
    MAJOR_UPGRADE = 1
    MINOR_UPGRADE = 2
    DOWNGRADE_INVALID = -2
    INVALID = -3

    @property
    def is_upgrade(self) -> bool:
        return self in (VersionComparison.MAJOR_UPGRADE, VersionComparison.MINOR_UPGRADE)

    @property
    def is_fatal(self) -> bool:
        return self in (VersionComparison.DOWNGRADE_INVALID, VersionComparison.INVALID)


def compare_versions(image: str, volume: str | None) -> VersionComparison:
    """Classify ``image`` against ``volume``.

    An empty volume version means a config store exists without a marker;
    it is treated as an upgrade that needs the upgrader but no
    reinitialization. Components are compared major, minor, patch and the
    first differing one decides. MAJOR_UPGRADE means the major component
    rose; a higher minor or patch is MINOR_UPGRADE, unlike legacy code 1,
    which was reported for any higher component.
    """
    image_version = Version.parse(image)
    if image_version is None:
        return VersionComparison.INVALID
    if not volume or not volume.strip():
        return VersionComparison.MINOR_UPGRADE
    volume_version = Version.parse(volume)
    if volume_version is None:
        return VersionComparison.INVALID
    if image_version == volume_version:
        return VersionComparison.EQUAL

    pairs = zip(volume_version.as_tuple(), image_version.as_tuple())
    for position, (ours, theirs) in enumerate(pairs):
        if ours > theirs:
            return VersionComparison.DOWNGRADE_INVALID
        if ours < theirs:
            if position == 0:
                return VersionComparison.MAJOR_UPGRADE
            return VersionComparison.MINOR_UPGRADE
    return VersionComparison.MINOR_UPGRADE
