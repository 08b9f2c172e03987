"""
Extractor exceptions

Configuration errors abort before any stream pass. Stream errors abort the
run. Geometry assembly errors only affect the entity being assembled.
"""


class ExtractError(Exception):
    """Base class for extractor errors"""


class ConfigurationError(ExtractError, ValueError):
    """Invalid settings, filter expression or entity kind"""


class FilterParseError(ConfigurationError):
    """An ID filter token is not an integer"""


class FilterCompileError(ConfigurationError):
    """A tag filter regular expression does not compile"""


class StreamError(ExtractError):
    """Entity stream used out of order or after close"""


class StreamDecodeError(StreamError):
    """The underlying reader failed to decode the input"""


class GeometryAssemblyError(ExtractError):
    """A valid geometry could not be built for one entity"""
    
    def __init__(self, entity_id: int, message: str):
        super().__init__(f"{entity_id}: {message}")
        self.entity_id = entity_id
