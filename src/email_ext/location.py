from email_ext.descriptor import Descriptor
from email_ext.descriptor import FormField
from email_ext.descriptor import GetFormText


class LocationConfiguration(Descriptor):
    """
    Where the host is reachable and who administers it. Only administrators may change it.
    """

    id = "jenkins.model.JenkinsLocationConfiguration"
    display_name = "Location"
    ordinal = 100

    FIELDS = (
        FormField("_.url", "url", "jenkinsUrl", label="URL"),
        FormField("_.adminAddress", "admin_address", "adminAddress", label="Administrator e-mail address"),
    )

    def Reset(self):
        self.url = ""
        self.admin_address = ""

    def Configure(self, form):
        url = GetFormText(form, "_.url").strip()
        if url and not url.endswith("/"):
            url += "/"
        self.url = url
        self.admin_address = GetFormText(form, "_.adminAddress").strip()
