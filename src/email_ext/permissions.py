"""
Permissions known to the host, and discovery of which of them the running host version defines.
"""
from typing import Dict
from typing import Iterator
from typing import Optional
from typing import Tuple

import attr


def ParseVersion(version: str) -> Tuple[int, ...]:
    """
    Converts a host version string such as "2.222" or "2.222.1" into a comparable tuple.
    """
    try:
        return tuple(int(part) for part in version.strip().split("."))
    except ValueError:
        raise ValueError(f"Invalid host version: {version!r}")


@attr.s(auto_attribs=True, frozen=True)
class Permission:
    """
    A permission that may be granted to users.

    Permissions form a tree through `implied_by`: holding the implying permission is enough to
    hold the implied one (e.g. "Administer" implies "Manage").
    """

    # Permission group, "Overall" for instance-wide permissions.
    group: str
    # Permission name: "Read", "Manage", ...
    name: str
    # First host version that defines this permission.
    since: str = "1.0"
    implied_by: Optional["Permission"] = attr.ib(default=None, repr=False)

    @property
    def id(self) -> str:
        return f"{self.group}/{self.name}"

    def IterImplying(self) -> Iterator["Permission"]:
        """
        Yields this permission followed by every permission that implies it.
        """
        permission: Optional[Permission] = self
        while permission is not None:
            yield permission
            permission = permission.implied_by


ADMINISTER = Permission("Overall", "Administer")
READ = Permission("Overall", "Read", implied_by=ADMINISTER)
# Narrower than ADMINISTER: allows changing the configuration without full system control.
MANAGE = Permission("Overall", "Manage", since="2.222", implied_by=ADMINISTER)

ALL_PERMISSIONS = (ADMINISTER, READ, MANAGE)


class PermissionNotDefinedError(LookupError):
    """
    Raised when asking for a permission the running host version does not define yet.

    :ivar unicode name:
        Name of the requested permission.

    :ivar unicode host_version:
        Version of the host that does not define it.
    """

    def __init__(self, name, host_version, since):
        self.name = name
        self.host_version = host_version
        self.since = since
        LookupError.__init__(
            self,
            f'Permission "{name}" is not defined by host version {host_version} '
            f"(requires {since} or newer)",
        )


class UnknownPermissionError(LookupError):
    """
    Raised when asking for a permission no host version defines.
    """

    def __init__(self, name):
        self.name = name
        LookupError.__init__(
            self,
            f'Unknown permission "{name}".\n\nAvailable permissions are:\n'
            + "\n".join(f"- {p.name}" for p in sorted(ALL_PERMISSIONS, key=_SortKey)),
        )


def _SortKey(permission: Permission) -> str:
    return permission.name


class PermissionCatalog:
    """
    Answers which permissions a given host version defines.

    Code that depends on permissions introduced in later host versions should query the catalog
    instead of assuming they exist.
    """

    def __init__(self, host_version: str) -> None:
        self.host_version = host_version
        self._version = ParseVersion(host_version)
        self._permissions: Dict[str, Permission] = {p.name: p for p in ALL_PERMISSIONS}

    def IsDefined(self, name: str) -> bool:
        permission = self._permissions.get(name)
        if permission is None:
            return False
        return ParseVersion(permission.since) <= self._version

    def GetPermission(self, name: str) -> Permission:
        """
        :param name:
            Permission name, e.g. "Manage". The "Overall/" prefix is optional.

        :raises UnknownPermissionError:
            If no host version defines it.

        :raises PermissionNotDefinedError:
            If this host version is older than the one introducing it.
        """
        name = name.split("/")[-1]
        try:
            permission = self._permissions[name]
        except KeyError:
            raise UnknownPermissionError(name)
        if not self.IsDefined(name):
            raise PermissionNotDefinedError(name, self.host_version, permission.since)
        return permission

    def GetDefinedPermissions(self):
        """
        :rtype: list(Permission)
        """
        return [p for p in ALL_PERMISSIONS if self.IsDefined(p.name)]
