from ghinst.kernel.contracts import InstallTarget
from ghinst.kernel.errors import InvalidTargetError


def parse_target(spec: str) -> InstallTarget:
    """
    Parse `owner/repo` or `owner/repo@tag`.

    Everything after the first `@` is the tag. An empty tag (`owner/repo@`)
    means the latest release.
    """
    slug, _, tag = spec.partition("@")
    owner, sep, repo = slug.partition("/")

    if not sep or not owner or not repo:
        raise InvalidTargetError(
            f"invalid target {spec!r}: expected owner/repo[@version]"
        )

    return InstallTarget(owner=owner, repo=repo, tag=tag or None)
