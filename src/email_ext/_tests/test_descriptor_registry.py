import pytest

from email_ext.authorization import ANONYMOUS
from email_ext.authorization import GrantAuthorizationStrategy
from email_ext.authorization import UnsecuredAuthorizationStrategy
from email_ext.authorization import User
from email_ext.descriptor import DescriptorRegistry
from email_ext.location import LocationConfiguration
from email_ext.permissions import ADMINISTER
from email_ext.permissions import PermissionCatalog
from email_ext.permissions import PermissionNotDefinedError
from email_ext.permissions import READ
from email_ext.publisher import ExtendedEmailPublisherDescriptor


def get_manage_permission(catalog):
    try:
        return catalog.GetPermission("Manage")
    except PermissionNotDefinedError:
        pytest.skip("Host version is too old for this test (requires the Manage permission)")


def create_registry(catalog, strategy):
    registry = DescriptorRegistry(catalog, strategy)
    registry.Register(ExtendedEmailPublisherDescriptor())
    registry.Register(LocationConfiguration())
    return registry


@pytest.mark.parametrize("host_version", ["2.221", "2.222", "2.400"])
def test_manage_permission_should_access(host_version):
    catalog = PermissionCatalog(host_version)
    manage = get_manage_permission(catalog)

    strategy = GrantAuthorizationStrategy()
    # Read access
    strategy.Grant(READ).To("user")
    # Read and Manage
    strategy.Grant(READ).To("manager")
    strategy.Grant(manage).To("manager")
    registry = create_registry(catalog, strategy)

    descriptors = registry.GetDescriptorsForGlobalConfig(User("user"))
    assert descriptors == [], "Global configuration should not be accessible to READ users"

    descriptors = registry.GetDescriptorsForGlobalConfig(User("manager"))
    found = [d for d in descriptors if isinstance(d, ExtendedEmailPublisherDescriptor)]
    assert len(found) == 1, "Global configuration should be accessible to MANAGE users"
    assert found[0] is registry.GetDescriptorByType(ExtendedEmailPublisherDescriptor)
    # Location requires Administer.
    assert descriptors == found


def test_old_host_requires_administer():
    catalog = PermissionCatalog("2.221")
    strategy = GrantAuthorizationStrategy()
    strategy.Grant(READ).To("user", "admin")
    strategy.Grant(ADMINISTER).To("admin")
    registry = create_registry(catalog, strategy)

    assert registry.GetDescriptorsForGlobalConfig(User("user")) == []
    assert [d.display_name for d in registry.GetDescriptorsForGlobalConfig(User("admin"))] == [
        "Location",
        "Extended E-mail Notification",
    ]


def test_administer_sees_everything_once():
    catalog = PermissionCatalog("2.222")
    strategy = GrantAuthorizationStrategy().Grant(ADMINISTER).To("admin")
    registry = create_registry(catalog, strategy)

    descriptors = registry.GetDescriptorsForGlobalConfig(User("admin"))
    assert [type(d) for d in descriptors] == [
        LocationConfiguration,
        ExtendedEmailPublisherDescriptor,
    ]
    assert registry.GetDescriptorsForGlobalConfig(ANONYMOUS) == []


def test_unsecured():
    registry = create_registry(PermissionCatalog("2.222"), UnsecuredAuthorizationStrategy())
    assert len(registry.GetDescriptorsForGlobalConfig(ANONYMOUS)) == 2
    assert list(registry) == registry.GetSortedDescriptors()


def test_lookup():
    registry = create_registry(PermissionCatalog("2.222"), UnsecuredAuthorizationStrategy())
    email = registry.GetDescriptorById("hudson.plugins.emailext.ExtendedEmailPublisher")
    assert isinstance(email, ExtendedEmailPublisherDescriptor)
    assert registry.GetDescriptorByType(ExtendedEmailPublisherDescriptor) is email
    assert registry.GetDescriptorById("unknown") is None

    class OtherDescriptor(ExtendedEmailPublisherDescriptor):
        pass

    assert registry.GetDescriptorByType(OtherDescriptor) is None

    with pytest.raises(AssertionError, match="Descriptor already registered"):
        registry.Register(ExtendedEmailPublisherDescriptor())


def test_location_configure():
    location = LocationConfiguration()
    assert location.AsDict() == {"url": "", "admin_address": ""}
    location.Configure({"_.url": " http://ci.example.com ", "_.adminAddress": "ci@example.com"})
    assert location.url == "http://ci.example.com/"
    assert location.admin_address == "ci@example.com"
    location.Configure({})
    assert location.url == ""
