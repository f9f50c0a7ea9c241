"""
The host owning the configuration records: permissions, security and the descriptor registry.
"""
import os
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple

from email_ext.authorization import ANONYMOUS
from email_ext.authorization import DummySecurityRealm
from email_ext.authorization import GrantAuthorizationStrategy
from email_ext.authorization import UnsecuredAuthorizationStrategy
from email_ext.authorization import User
from email_ext.descriptor import Descriptor
from email_ext.descriptor import DescriptorRegistry
from email_ext.location import LocationConfiguration
from email_ext.permissions import PermissionCatalog
from email_ext.publisher import ExtendedEmailPublisherDescriptor


DEFAULT_HOME = "email_ext_home"
# First host version defining the "Manage" permission.
DEFAULT_HOST_VERSION = "2.222"


class Host:
    """
    Everything the global configuration needs from the automation server it is part of.

    Records are created with their defaults and overlaid with whatever was previously persisted
    in `home`.
    """

    def __init__(
        self,
        home: Optional[str] = None,
        version: str = DEFAULT_HOST_VERSION,
        authorization_strategy=None,
        security_realm: Optional[DummySecurityRealm] = None,
    ) -> None:
        self.home = home
        self.version = version
        self.catalog = PermissionCatalog(version)
        self.authorization_strategy = (
            authorization_strategy or UnsecuredAuthorizationStrategy()
        )
        # None means no authentication: every caller is anonymous.
        self.security_realm = security_realm
        self.registry = DescriptorRegistry(self.catalog, self.authorization_strategy)
        for descriptor_class in (ExtendedEmailPublisherDescriptor, LocationConfiguration):
            descriptor = self.registry.Register(descriptor_class(home))
            descriptor.Load()

    @classmethod
    def FromEnvironment(cls, environ: Mapping[str, str]) -> "Host":
        """
        Creates a host from settings:

        * EMAIL_EXT_HOME: directory where records are persisted.
        * EMAIL_EXT_HOST_VERSION: version of the host.
        * EMAIL_EXT_GRANTS: if given, enables authentication (dummy realm) and grants
          permissions as in "Read=user,manager;Manage=manager" ("*" meaning everyone).
        """
        version = environ.get("EMAIL_EXT_HOST_VERSION", DEFAULT_HOST_VERSION)
        home = environ.get("EMAIL_EXT_HOME", os.path.abspath(DEFAULT_HOME))
        grants_text = environ.get("EMAIL_EXT_GRANTS", "").strip()
        if not grants_text:
            return cls(home=home, version=version)

        catalog = PermissionCatalog(version)
        strategy = GrantAuthorizationStrategy()
        for permission_name, user_ids in ParseGrants(grants_text):
            strategy.Grant(catalog.GetPermission(permission_name)).To(*user_ids)
        return cls(
            home=home,
            version=version,
            authorization_strategy=strategy,
            security_realm=DummySecurityRealm(),
        )

    @property
    def is_secured(self) -> bool:
        return self.security_realm is not None

    def Authenticate(self, username: Optional[str], password: Optional[str]) -> User:
        """
        :raises AuthenticationError:
            If credentials were given but the security realm rejects them.
        """
        if self.security_realm is None or not username:
            return ANONYMOUS
        return self.security_realm.Authenticate(username, password or "")

    def HasPermission(self, user: User, permission_name: str) -> bool:
        """
        Like `authorization_strategy.HasPermission`, by permission name.

        :raises PermissionNotDefinedError:
        """
        permission = self.catalog.GetPermission(permission_name)
        return self.authorization_strategy.HasPermission(user, permission)

    def GetDescriptorByType(self, descriptor_class):
        return self.registry.GetDescriptorByType(descriptor_class)

    def GetDescriptorsForGlobalConfig(self, user: User) -> List[Descriptor]:
        return self.registry.GetDescriptorsForGlobalConfig(user)

    def SubmitConfiguration(self, user: User, form: Mapping[str, str]) -> List[Descriptor]:
        """
        Applies a global configuration submission to every record visible to `user`, persisting
        them. Records are validated in order; a rejected record and the ones after it are left
        untouched.

        :returns:
            The configured records.
        """
        descriptors = self.GetDescriptorsForGlobalConfig(user)
        for descriptor in descriptors:
            descriptor.Configure(form)
            descriptor.Save()
        return descriptors

    def GetConfigurationValues(self, user: User) -> Dict[str, Dict[str, object]]:
        """
        Current values of every record visible to `user`, keyed by record id.
        """
        return {d.id: d.AsDict() for d in self.GetDescriptorsForGlobalConfig(user)}


def ParseGrants(grants_text: str) -> List[Tuple[str, List[str]]]:
    """
    Parses "Read=user,manager;Manage=manager" into
    [("Read", ["user", "manager"]), ("Manage", ["manager"])].
    """
    result = []
    for entry in grants_text.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        if "=" not in entry:
            raise ValueError(
                f'Invalid grant "{entry}", expected "<permission>=<user>[,<user>...]"'
            )
        permission_name, users = entry.split("=", 1)
        user_ids = [x.strip() for x in users.split(",") if x.strip()]
        result.append((permission_name.strip(), user_ids))
    return result
