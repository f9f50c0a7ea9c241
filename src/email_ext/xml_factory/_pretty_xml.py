from xml.sax.saxutils import escape


INDENT = "  "

# "&#xd;" is the hexadecimal xml entity for "\r".
_TEXT_ENTITIES = {"\r": "&#xd;"}
_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#xd;"}


def WritePrettyXMLElement(oss, element, indent=0):
    """
    Writes an xml element in the given file (oss) recursively, in pretty xml.

    Text contents are written verbatim (no indentation is added around them), so whatever was
    stored in an element is read back unchanged, including leading/trailing whitespace and
    new lines.

    :param file oss:
        The output file to write

    :param Element element:
        The Element instance (ElementTree)

    :param int indent:
        The level of indentation to write the tag.
        This is used internally for pretty printing.
    """
    oss.write(INDENT * indent + "<%s" % element.tag)
    for i_name, i_value in sorted(element.attrib.items()):
        oss.write(' %s="%s"' % (i_name, escape(i_value, _ATTRIBUTE_ENTITIES)))

    if len(element) == 0 and element.text is None:
        oss.write("/>")
        return

    oss.write(">")

    for i_element in element:
        oss.write("\n")
        WritePrettyXMLElement(oss, i_element, indent + 1)

    if element.text is not None:
        oss.write(escape(element.text, _TEXT_ENTITIES))
    else:
        oss.write("\n" + INDENT * indent)
    oss.write("</%s>" % element.tag)
