"""Exception types raised by the loader and enrichment stages.

:class:`~ifcowl2lbd.lbd.converter.Converter` catches every
:class:`ConversionError` at its boundary and reports it in the
:class:`~ifcowl2lbd.lbd.model.ConversionResult` instead of raising.
"""


class ConversionError(Exception):
    """Base class for recoverable conversion failures."""


class ParseError(ConversionError):
    """The input file could not be read or is not valid RDF."""


class UnsupportedSchemaError(ConversionError):
    """The input is valid RDF but no ifcOWL schema edition was recognised."""


class GeolocationError(ConversionError):
    """Site placement data is missing or malformed."""


class GuidError(ConversionError):
    """A compact IFC GUID could not be decoded."""
