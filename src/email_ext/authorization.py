"""
Users, authentication and authorization strategies used by the host.
"""
from typing import Dict
from typing import Optional
from typing import Set

import attr

from email_ext.permissions import Permission


@attr.s(auto_attribs=True, frozen=True)
class User:
    """
    A caller identity, already authenticated by a security realm.
    """

    id: str

    @property
    def is_anonymous(self) -> bool:
        return self.id == ANONYMOUS.id


ANONYMOUS = User("anonymous")


class AuthenticationError(Exception):
    """
    Raised when the security realm rejects the given credentials.
    """


class DummySecurityRealm:
    """
    Security realm accepting any user whose password is equal to its user name.

    Useful to exercise authorization strategies without a real user database.
    """

    def Authenticate(self, username: str, password: str) -> User:
        if not username or username != password:
            raise AuthenticationError(f'Invalid credentials for user "{username}"')
        return User(username)


class UnsecuredAuthorizationStrategy:
    """
    Everyone, including anonymous callers, holds every permission.
    """

    def HasPermission(self, user: User, permission: Permission) -> bool:
        return True


# Grantee standing for every user, anonymous included.
EVERYONE = "*"


class GrantAuthorizationStrategy:
    """
    Authorization strategy backed by an explicit table of grants.

    Example:
        strategy = GrantAuthorizationStrategy()
        strategy.Grant(READ).To("user", "manager")
        strategy.Grant(MANAGE).To("manager")
    """

    def __init__(self) -> None:
        self._grants: Dict[Permission, Set[str]] = {}

    class _Grant:
        def __init__(self, strategy: "GrantAuthorizationStrategy", permissions) -> None:
            self._strategy = strategy
            self._permissions = permissions

        def To(self, *user_ids: str) -> "GrantAuthorizationStrategy":
            for permission in self._permissions:
                self._strategy._grants.setdefault(permission, set()).update(user_ids)
            return self._strategy

        def ToEveryone(self) -> "GrantAuthorizationStrategy":
            return self.To(EVERYONE)

    def Grant(self, *permissions: Permission) -> "GrantAuthorizationStrategy._Grant":
        return self._Grant(self, permissions)

    def GetGrantees(self, permission: Permission) -> Set[str]:
        return set(self._grants.get(permission, ()))

    def HasPermission(self, user: Optional[User], permission: Permission) -> bool:
        """
        A user holds `permission` when it, or any permission implying it, was granted to the
        user or to everyone.
        """
        user = user or ANONYMOUS
        for candidate in permission.IterImplying():
            grantees = self._grants.get(candidate, ())
            if user.id in grantees or EVERYONE in grantees:
                return True
        return False
