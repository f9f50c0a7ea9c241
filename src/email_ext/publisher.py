"""
Global configuration record of the extended e-mail notification publisher: defaults used by
every job sending build notification e-mails.
"""
import re

from email_ext.descriptor import Descriptor
from email_ext.descriptor import FormField
from email_ext.descriptor import FormValidationError
from email_ext.descriptor import GetFormText
from email_ext.descriptor import IsChecked
from email_ext.permissions import ADMINISTER


CONTENT_TYPES = ("text/plain", "text/html")

DEFAULT_CONTENT_TYPE = "text/plain"
DEFAULT_SUBJECT = "$PROJECT_NAME - Build # $BUILD_NUMBER - $BUILD_STATUS!"
DEFAULT_BODY = (
    "$PROJECT_NAME - Build # $BUILD_NUMBER - $BUILD_STATUS:\n"
    "\n"
    "Check console output at $BUILD_URL to view the results."
)

_BYTES_PER_MB = 1024 * 1024


def SplitAddresses(text):
    """
    :param unicode text:
        Addresses separated by commas and/or whitespace.

    :rtype: list(unicode)
    """
    return [x for x in re.split(r"[,\s]+", text or "") if x]


def ParseProperties(text):
    """
    Parses text in java-properties format ("key=value" or "key: value", one per line).

    Blank lines and lines starting with "#" or "!" are ignored. Lines without a separator define
    a key with an empty value.

    :rtype: dict(unicode,unicode)
    """
    result = {}
    for line in (text or "").splitlines():
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        match = re.match(r"([^=:]*?)\s*[=:]\s*(.*)$", line)
        if match is None:
            result[line] = ""
        else:
            key, value = match.groups()
            result[key] = value
    return result


class ExtendedEmailPublisherDescriptor(Descriptor):
    """
    The global configuration record for build notification e-mails.

    Lives for the whole host lifetime, created with the defaults below and changed only through
    configuration submissions.
    """

    id = "hudson.plugins.emailext.ExtendedEmailPublisher"
    display_name = "Extended E-mail Notification"

    FIELDS = (
        FormField(
            "ext_mailer_default_content_type",
            "default_content_type",
            "defaultContentType",
            widget="select",
            label="Default Content Type",
            choices=CONTENT_TYPES,
        ),
        FormField(
            "ext_mailer_use_list_id", "use_list_id", "useListId", "checkbox", "Use List-ID Email Header"
        ),
        FormField("ext_mailer_list_id", "list_id", "listId", label="List ID"),
        FormField(
            "ext_mailer_add_precedence_bulk",
            "precedence_bulk",
            "precedenceBulk",
            "checkbox",
            "Add 'Precedence: bulk' Email Header",
        ),
        FormField(
            "ext_mailer_default_recipients",
            "default_recipients",
            "defaultRecipients",
            label="Default Recipients",
        ),
        FormField(
            "ext_mailer_default_replyto", "default_replyto", "defaultReplyTo", label="Reply To List"
        ),
        FormField(
            "ext_mailer_emergency_reroute",
            "emergency_reroute",
            "emergencyReroute",
            label="Emergency reroute",
        ),
        FormField(
            "ext_mailer_allowed_domains",
            "allowed_domains",
            "allowedDomains",
            label="Allowed Domains",
        ),
        FormField(
            "ext_mailer_excluded_committers",
            "excluded_committers",
            "excludedCommitters",
            label="Excluded Recipients",
        ),
        FormField(
            "ext_mailer_default_subject",
            "default_subject",
            "defaultSubject",
            label="Default Subject",
        ),
        FormField(
            "ext_mailer_max_attachment_size",
            "max_attachment_size",
            "maxAttachmentSize",
            "number",
            "Maximum Attachment Size (MB)",
        ),
        FormField(
            "ext_mailer_default_body", "default_body", "defaultBody", "textarea", "Default Content"
        ),
        FormField(
            "ext_mailer_adv_properties",
            "adv_properties",
            "advProperties",
            "textarea",
            "Additional SMTP properties",
        ),
        FormField(
            "ext_mailer_debug_mode", "debug_mode", "debugMode", "checkbox", "Enable Debug Mode"
        ),
    )

    # Text fields missing from a submission fall back to these instead of "".
    _TEXT_DEFAULTS = {
        "default_subject": DEFAULT_SUBJECT,
        "default_body": DEFAULT_BODY,
    }

    def Reset(self):
        self.default_content_type = DEFAULT_CONTENT_TYPE
        self.use_list_id = False
        self.list_id = ""
        self.precedence_bulk = False
        self.default_recipients = ""
        self.default_replyto = ""
        self.emergency_reroute = ""
        self.allowed_domains = ""
        self.excluded_committers = ""
        self.default_subject = DEFAULT_SUBJECT
        # In bytes; None means no limit.
        self.max_attachment_size = None
        self.default_body = DEFAULT_BODY
        self.adv_properties = ""
        self.debug_mode = False

    def GetRequiredGlobalConfigPagePermission(self, catalog):
        # Hosts older than the "Manage" permission only let administrators configure it.
        if catalog.IsDefined("Manage"):
            return catalog.GetPermission("Manage")
        return ADMINISTER

    def Configure(self, form):
        content_type = form.get("ext_mailer_default_content_type", DEFAULT_CONTENT_TYPE)
        if content_type not in CONTENT_TYPES:
            raise FormValidationError(
                "ext_mailer_default_content_type",
                f"expected one of {', '.join(CONTENT_TYPES)}, got {content_type!r}",
            )

        max_attachment_size = self._ParseMaxAttachmentSize(
            form.get("ext_mailer_max_attachment_size", "")
        )

        use_list_id = IsChecked(form, "ext_mailer_use_list_id")
        texts = {
            field.attribute: GetFormText(
                form, field.form_name, self._TEXT_DEFAULTS.get(field.attribute, "")
            )
            for field in self.FIELDS
            if field.widget in ("text", "textarea")
        }

        self.default_content_type = content_type
        self.use_list_id = use_list_id
        self.list_id = texts["list_id"] if use_list_id else ""
        self.precedence_bulk = IsChecked(form, "ext_mailer_add_precedence_bulk")
        self.default_recipients = texts["default_recipients"]
        self.default_replyto = texts["default_replyto"]
        self.emergency_reroute = texts["emergency_reroute"]
        self.allowed_domains = texts["allowed_domains"]
        self.excluded_committers = texts["excluded_committers"]
        self.default_subject = texts["default_subject"]
        self.max_attachment_size = max_attachment_size
        self.default_body = texts["default_body"]
        self.adv_properties = texts["adv_properties"]
        self.debug_mode = IsChecked(form, "ext_mailer_debug_mode")

    @staticmethod
    def _ParseMaxAttachmentSize(text):
        """
        :param unicode text:
            Size in megabytes, as typed in the form.

        :rtype: int|None
        :returns:
            Size in bytes, or None when blank or not positive.
        """
        text = (text or "").strip()
        if not text:
            return None
        try:
            size_mb = int(text)
        except ValueError:
            raise FormValidationError(
                "ext_mailer_max_attachment_size", f"not a whole number of megabytes: {text!r}"
            )
        if size_mb <= 0:
            return None
        return size_mb * _BYTES_PER_MB

    def _FormatFormValue(self, field, value):
        if field.attribute == "max_attachment_size":
            mb = self.GetMaxAttachmentSizeMb()
            return "" if mb is None else str(mb)
        return Descriptor._FormatFormValue(self, field, value)

    def _ParseStoredValue(self, field, text):
        if field.attribute == "max_attachment_size":
            text = text.strip()
            if not text:
                return None
            size = int(text)
            # Non-positive sizes (-1 in files written by Jenkins) mean no limit.
            return size if size > 0 else None
        return Descriptor._ParseStoredValue(self, field, text)

    def GetMaxAttachmentSizeMb(self):
        """
        :rtype: int|None
        :returns:
            The limit in megabytes, rounded up so that a limit under 1 MB is not shown as 0.
        """
        if self.max_attachment_size is None:
            return None
        return -(-self.max_attachment_size // _BYTES_PER_MB)

    def GetListId(self):
        """
        :return unicode:
            The List-ID header value, empty when list ids are disabled.
        """
        return self.list_id if self.use_list_id else ""

    def GetSmtpProperties(self):
        """
        :rtype: dict(unicode,unicode)
        :returns:
            Additional SMTP session properties, e.g. {'mail.smtp.starttls.enable': 'true'}.
        """
        return ParseProperties(self.adv_properties)

    def GetDefaultRecipients(self):
        return SplitAddresses(self.default_recipients)

    def GetEmergencyRecipients(self):
        return SplitAddresses(self.emergency_reroute)

    def IsExcludedRecipient(self, address):
        """
        Whether `address` (or its user name part) is listed in the excluded recipients.
        """
        address = address.strip().lower()
        user_name = address.split("@", 1)[0]
        excluded = {x.lower() for x in SplitAddresses(self.excluded_committers)}
        return address in excluded or user_name in excluded

    def IsAllowedRecipient(self, address):
        """
        Whether `address` belongs to one of the allowed domains. Every address is allowed when
        no domain is configured.
        """
        domains = [x.lstrip("@").lower() for x in SplitAddresses(self.allowed_domains)]
        if not domains:
            return True
        if "@" not in address:
            return False
        domain = address.strip().rsplit("@", 1)[1].lower()
        return domain in domains
