from .definition import Processor, ResolvedOptions, UploaderDefinition, VersionSpec
from .files import SanitizedFile, StoredFile, sanitize_filename

__all__ = [
    'Processor',
    'ResolvedOptions',
    'UploaderDefinition',
    'VersionSpec',
    'SanitizedFile',
    'StoredFile',
    'sanitize_filename',
]
