from ._pretty_xml import WritePrettyXMLElement
from ._xml_factory import XmlFactory
