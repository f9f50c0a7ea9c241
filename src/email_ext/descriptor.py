"""
Configuration records ("descriptors") shown in the global configuration page, and the registry
deciding which of them each user may see.
"""
import os
import re

import attr

from email_ext.permissions import ADMINISTER
from email_ext.xml_factory import XmlFactory


@attr.s(auto_attribs=True, frozen=True)
class FormField:
    """
    Binds a form input to a descriptor attribute and to its tag in the persisted XML.
    """

    # Name of the input in the configuration form, e.g. "ext_mailer_default_subject".
    form_name: str
    # Attribute of the descriptor holding the value.
    attribute: str
    # Tag used when persisting the value.
    xml_tag: str
    # One of "text", "textarea", "checkbox", "select" or "number".
    widget: str = "text"
    # Label shown in the form.
    label: str = ""
    # Allowed values for "select" widgets.
    choices: tuple = ()


class FormValidationError(ValueError):
    """
    Raised when a submitted form value is rejected.

    :ivar unicode field:
        Form name of the rejected field.
    """

    def __init__(self, field, message):
        self.field = field
        ValueError.__init__(self, f'Invalid value for "{field}": {message}')


# Characters XML 1.0 documents cannot contain, even escaped.
_INVALID_XML_CHARS = re.compile(
    "[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def GetFormText(form, name, default=""):
    """
    Returns a text value from a submitted form.

    :raises FormValidationError:
        If the text has characters that cannot be persisted.
    """
    value = form.get(name, default)
    value = "" if value is None else str(value)
    match = _INVALID_XML_CHARS.search(value)
    if match is not None:
        raise FormValidationError(
            name, f"unsupported character {match.group()!r} at position {match.start()}"
        )
    return value


def IsChecked(form, name):
    """
    Checkbox semantics: a checkbox is checked iff its name is present in the submission (HTML
    forms omit unchecked boxes). Explicit "false"/"off" values are also taken as unchecked.
    """
    if name not in form:
        return False
    return str(form[name]).strip().lower() not in ("false", "off", "0", "no")


class Descriptor(object):
    """
    Base class for a global configuration record.

    Subclasses declare `FIELDS`, set their defaults in `Reset` and implement `Configure`, which
    binds a submitted form (a mapping of form names to values) to attributes.
    """

    # Identifier of the record; also the root tag and file name of the persisted XML.
    id = None
    display_name = None
    # Sections are sorted by ordinal (higher first), then by display name.
    ordinal = 0
    FIELDS = ()

    def __init__(self, home=None):
        """
        :param unicode|None home:
            Directory where the record is persisted. If None, the record lives only in memory.
        """
        self.home = home
        self.Reset()

    def Reset(self):
        """
        Restores default values for all fields.
        """
        raise NotImplementedError()

    def Configure(self, form):
        """
        Updates this record from a submitted form.

        The form is validated as a whole first: if any value is rejected, nothing changes.

        :param dict(unicode,unicode) form:
        :raises FormValidationError:
        """
        raise NotImplementedError()

    def GetRequiredGlobalConfigPagePermission(self, catalog):
        """
        :param PermissionCatalog catalog:
            Permissions defined by the running host.

        :rtype: Permission
        :returns:
            Permission a user must hold to see and change this record.
        """
        return ADMINISTER

    def GetFormValues(self):
        """
        Values as rendered in the form: booleans as booleans, everything else as text.

        :rtype: dict(unicode,object)
        """
        result = {}
        for field in self.FIELDS:
            value = getattr(self, field.attribute)
            if field.widget != "checkbox":
                value = self._FormatFormValue(field, value)
            result[field.form_name] = value
        return result

    def _FormatFormValue(self, field, value):
        return "" if value is None else str(value)

    def AsDict(self):
        """
        :rtype: dict(unicode,object)
        :returns:
            Current value of each field, keyed by attribute name.
        """
        return {field.attribute: getattr(self, field.attribute) for field in self.FIELDS}

    def GetConfigFile(self):
        if self.home is None:
            return None
        return os.path.join(self.home, f"{self.id}.xml")

    def Save(self):
        """
        Persists this record in its home directory (no-op for in-memory records).
        """
        filename = self.GetConfigFile()
        if filename is None:
            return
        xml = XmlFactory(self.id)
        for field in self.FIELDS:
            value = getattr(self, field.attribute)
            if isinstance(value, bool):
                value = str(value).lower()
            elif value is None:
                value = ""
            xml[field.xml_tag] = value
        os.makedirs(self.home, exist_ok=True)
        # Readers only ever see a complete file.
        temp_filename = filename + ".tmp"
        xml.Write(temp_filename)
        os.replace(temp_filename, filename)

    def Load(self):
        """
        Reads values previously persisted with `Save`. Fields missing from the file (or a
        missing file) keep their current values.
        """
        filename = self.GetConfigFile()
        if filename is None or not os.path.isfile(filename):
            return
        xml = XmlFactory.FromFile(filename)
        if xml.tag != self.id:
            raise RuntimeError(
                f'Unexpected root element "{xml.tag}" in {filename} (expected "{self.id}")'
            )
        for field in self.FIELDS:
            text = xml.GetText(field.xml_tag)
            if text is None:
                continue
            try:
                value = self._ParseStoredValue(field, text)
            except ValueError:
                raise RuntimeError(
                    f'Invalid value for "{field.xml_tag}" in {filename}: {text!r}'
                )
            setattr(self, field.attribute, value)

    def _ParseStoredValue(self, field, text):
        if field.widget == "checkbox":
            return text.strip().lower() == "true"
        return text


class DescriptorRegistry(object):
    """
    Registry of the configuration records of a host.
    """

    def __init__(self, catalog, authorization_strategy):
        """
        :param PermissionCatalog catalog:
        :param authorization_strategy:
            Object answering `HasPermission(user, permission)`.
        """
        self.catalog = catalog
        self.authorization_strategy = authorization_strategy
        self._descriptors = []

    def Register(self, descriptor):
        assert descriptor.id is not None, "Descriptors must define an id"
        assert all(
            d.id != descriptor.id for d in self._descriptors
        ), f"Descriptor already registered: {descriptor.id}"
        self._descriptors.append(descriptor)
        return descriptor

    def __iter__(self):
        return iter(self.GetSortedDescriptors())

    def GetSortedDescriptors(self):
        return sorted(self._descriptors, key=lambda d: (-d.ordinal, d.display_name))

    def GetDescriptorByType(self, descriptor_class):
        """
        :rtype: Descriptor|None
        """
        for descriptor in self._descriptors:
            if type(descriptor) is descriptor_class:
                return descriptor
        return None

    def GetDescriptorById(self, descriptor_id):
        """
        :rtype: Descriptor|None
        """
        for descriptor in self._descriptors:
            if descriptor.id == descriptor_id:
                return descriptor
        return None

    def IsVisible(self, descriptor, user):
        """
        Whether `user` may see (and change) `descriptor` in the global configuration.
        """
        permission = descriptor.GetRequiredGlobalConfigPagePermission(self.catalog)
        return self.authorization_strategy.HasPermission(user, permission)

    def GetDescriptorsForGlobalConfig(self, user):
        """
        :param User user:
            Caller identity.

        :rtype: list(Descriptor)
        :returns:
            Sorted configuration records visible to `user`, each one at most once.
        """
        return [d for d in self.GetSortedDescriptors() if self.IsVisible(d, user)]
