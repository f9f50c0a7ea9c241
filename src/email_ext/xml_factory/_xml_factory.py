import io
from io import StringIO
from xml.etree import ElementTree

from ._pretty_xml import WritePrettyXMLElement


class XmlFactory(object):
    """
    Small helper to create and read the XML files where configuration records are persisted.

    Elements are addressed by slash separated paths, intermediate elements being created as
    necessary.

    Example:
        xml = XmlFactory('hudson.plugins.emailext.ExtendedEmailPublisher')

        xml['defaultSubject'] = 'Build failed'  # Create defaultSubject tag with text
        xml['smtp/port'] = '25'  # Create intermediate nodes
        xml['smtp@class'] = 'default'  # Create attribute on "smtp" tag

        xml.Write('filename.xml')  # Always write with a pretty XML format
    """

    def __init__(self, root_element):
        """
        :type root_element: str | Element
        :param root_element:
        """
        if isinstance(root_element, str):
            self.root = ElementTree.Element(root_element)
        elif isinstance(root_element, ElementTree.Element):
            self.root = root_element
        else:
            raise TypeError(
                "Unknown root_element parameter type: %s" % type(root_element)
            )

    @classmethod
    def FromString(cls, contents):
        """
        :param unicode contents:
            XML contents, as written by `GetContents`.

        :rtype: XmlFactory
        """
        return cls(ElementTree.fromstring(contents))

    @classmethod
    def FromFile(cls, filename):
        """
        :param unicode filename:
            XML file, as written by `Write`.

        :rtype: XmlFactory
        """
        with io.open(filename, "r", encoding="utf-8") as f:
            return cls.FromString(f.read())

    @property
    def tag(self):
        return self.root.tag

    def __setitem__(self, name, value):
        """
        Create a new element or attribute:

        :param unicode name:
            A XML path including or not an attribute definition

        :param unicode value:
            The value to associate with the element or attribute

        @examples:
            xml['alpha/bravo'] = 'XXX' # Create bravo tag with 'XXX' as text contents
            xml['alpha@class'] = 'CLS' # Create alpha with the attribute class='CLS'
        """
        if "@" in name:
            element_name, attr_name = name.rsplit("@", 1)
            result = self._ObtainElement(element_name)
            result.attrib[attr_name] = str(value)
        else:
            result = self._ObtainElement(name)
            result.text = str(value)

    def __getitem__(self, name):
        """
        Create (if necessary) and returns xml element.

        :param unicode name:
            A XML path, without attribute definitions.

        :rtype: XmlFactory
        """
        assert "@" not in name, 'The "at" (@) is used for attribute definitions'
        return XmlFactory(self._ObtainElement(name))

    def __contains__(self, name):
        return self.root.find(name) is not None

    def _ObtainElement(self, name):
        """
        Create and returns a xml element with the given name.

        :param unicode name:
            A XML path. Each sub-element tag separated by a slash.
            If any of the parts ends with a "+" it creates a new sub-element in that part even if
            it already exists.
        """
        result = parent = self.root
        if name == "":
            return result
        for i_part in name.split("/"):
            if i_part.endswith("+"):
                result = ElementTree.SubElement(parent, i_part[:-1])
            else:
                result = parent.find(i_part)
                if result is None:
                    result = ElementTree.SubElement(parent, i_part)
            parent = result
        return result

    def GetText(self, name, default=None):
        """
        Returns the text of an existing element, without creating it.

        Elements written with an empty text (``<tag></tag>`` or ``<tag/>``) return an empty
        string; missing elements return `default`.
        """
        element = self.root.find(name)
        if element is None:
            return default
        return element.text if element.text is not None else ""

    def Print(self, oss=None, xml_header=False):
        """
        Prints the resulting XML in the stdout or the given output stream.

        :type oss: file-like object | None
        :param oss:
            A file-like object where to write the XML output. If None, writes the output in the
            stdout.
        """
        if oss is None:
            import sys

            oss = sys.stdout

        if xml_header:
            oss.write('<?xml version="1.0" ?>\n')
        WritePrettyXMLElement(oss, self.root)

    def GetContents(self, xml_header=False):
        """
        Returns the resulting XML.

        :return unicode:
        """
        oss = StringIO()
        self.Print(oss, xml_header=xml_header)
        return oss.getvalue()

    def Write(self, filename):
        """
        Writes the resulting XML (with header) to the given file.
        """
        with io.open(filename, "w", encoding="utf-8", newline="") as f:
            self.Print(f, xml_header=True)
            f.write("\n")

    def AsDict(self):
        """
        Returns the data-structure as dict: leaf elements map to their text (empty text being
        an empty string) and elements with children to nested dicts.

        :return dict:
        """

        def _ElementToValue(element):
            if len(element) == 0:
                return element.text if element.text is not None else ""
            return {child.tag: _ElementToValue(child) for child in element}

        result = _ElementToValue(self.root)
        return result if isinstance(result, dict) else {}
