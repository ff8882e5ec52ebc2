"""
Location of the opam bootstrap binary published on the opam release page.

The bootstrap version is fixed by the caller and is unrelated to the OCaml
version installed afterwards. Only the Linux strategy downloads a release
binary; Windows bootstraps through Cygwin and macOS through Homebrew.
"""

from dataclasses import dataclass

from opamkit.core.platform import PlatformDescriptor

RELEASE_URL_TEMPLATE = "https://github.com/ocaml/opam/releases/download/{version}/{filename}"


@dataclass(frozen=True)
class ArtifactReference:
    """Release binary to download."""

    filename: str
    download_url: str


def resolve_filename(bootstrap_version: str, platform: PlatformDescriptor) -> str:
    """
    Get the release file name of the opam binary for a platform.

    Only two architectures are published: 'x64' maps to 'x86_64' and every
    other architecture falls back to 'i686'.

    Example:
        >>> resolve_filename("2.0.7", PlatformDescriptor("darwin", "x64", "19.6.0"))
        'opam-2.0.7-x86_64-macos'
    """
    os_name = "macos" if platform.os == "darwin" else platform.os
    arch = "x86_64" if platform.arch == "x64" else "i686"
    return f"opam-{bootstrap_version}-{arch}-{os_name}"


def resolve_download_url(bootstrap_version: str, filename: str) -> str:
    """Get the release download URL of an opam binary."""
    return RELEASE_URL_TEMPLATE.format(version=bootstrap_version, filename=filename)


def resolve_artifact(
    bootstrap_version: str, platform: PlatformDescriptor
) -> ArtifactReference:
    filename = resolve_filename(bootstrap_version, platform)
    return ArtifactReference(
        filename=filename,
        download_url=resolve_download_url(bootstrap_version, filename),
    )
